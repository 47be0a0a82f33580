"""
Shared fixtures. Paillier key generation dominates the run time, so one
honest key generation is shared per test session.
"""

import pytest

from twopartyecdsa import party_one, party_two


def run_keygen(secret_share=None, chain_code=0):
    p1 = party_one.KeyGen()
    p2 = party_two.KeyGen(secret_share)

    p1_first = p1.first_message()
    p2_first = p2.first_message()
    p1_second = p1.second_message(p2_first)
    p2.second_message(p1_first, p1_second)

    return p1.master_key(chain_code), p2.master_key(chain_code)


def run_signing(master_key1, master_key2, message):
    signer1 = master_key1.signer()
    signer2 = master_key2.signer()

    p2_first = signer2.first_message()
    p1_first = signer1.first_message()
    sign_message = signer2.second_message(p1_first, message)
    return signer1.second_message(sign_message, p2_first, message)


@pytest.fixture(scope="session")
def master_keys():
    return run_keygen()


@pytest.fixture(scope="session")
def keygen():
    return run_keygen


@pytest.fixture(scope="session")
def sign():
    return run_signing


@pytest.fixture(scope="module")
def party_one_transcript():
    """
    Honest party one messages. Party two's round one output only feeds
    party one's DLog check, so any fresh party two can consume these.
    """
    p1 = party_one.KeyGen()
    first = p1.first_message()
    second = p1.second_message(party_two.KeyGen().first_message())
    return first, second
