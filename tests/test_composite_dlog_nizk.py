import pytest

from twopartyecdsa.composite_dlog_nizk import DLogStatement, generate_h1_h2_n_tilde, proove, verify


@pytest.fixture(scope="module")
def setup():
    n_tilde, h1, h2, xhi = generate_h1_h2_n_tilde()
    return DLogStatement(N=n_tilde, g=h1, ni=h2), xhi


def test_setup_relation(setup):
    statement, xhi = setup
    assert pow(statement.g, xhi, statement.N) * statement.ni % statement.N == 1


def test_composite_dlog_proof(setup):
    statement, xhi = setup
    proof = proove(statement, xhi)
    assert verify(proof, statement)


def test_composite_dlog_wrong_secret(setup):
    statement, xhi = setup
    proof = proove(statement, xhi + 1)
    assert not verify(proof, statement)


def test_composite_dlog_other_statement(setup):
    statement, xhi = setup
    proof = proove(statement, xhi)
    assert not verify(proof, statement._replace(ni=statement.ni * statement.g % statement.N))
    assert not verify(proof, statement._replace(N=statement.N + 2))
    assert not verify(proof._replace(y=proof.y + 1), statement)
