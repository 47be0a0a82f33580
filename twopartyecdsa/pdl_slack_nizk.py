"""
Zero knowledge proof that a Paillier ciphertext encrypts the discrete log of
an EC point, with slack: the extracted plaintext is only guaranteed to lie in
[-q^3, q^3] rather than [0, q).

Please refer to https://eprint.iacr.org/2017/552.pdf section 6 and
https://eprint.iacr.org/2019/114.pdf appendix A.1 for the range commitment
over (N~, h1, h2).

Statement: ciphertext c = (1+N)^x * r^N mod N^2 under ek, Q = x*G.
Witness:   x, r.
"""

from collections import namedtuple
from hashlib import sha256

from .ecdsa_op import O, ec_add, ec_inv, ec_scalar_mul, order, valid, point_bytes
from .rand import sample_below, sample_range

PDLwSlackStatement = namedtuple("PDLwSlackStatement", "ciphertext ek Q G h1 h2 N_tilde")
PDLwSlackWitness = namedtuple("PDLwSlackWitness", "x r")
PDLwSlackProof = namedtuple("PDLwSlackProof", "z u1 u2 u3 s1 s2 s3")


def commitment_unknown_order(h1, h2, N_tilde, x, r):
    """h1^x * h2^r mod N_tilde, exponents may be negative."""
    return pow(h1, x, N_tilde) * pow(h2, r, N_tilde) % N_tilde


def _challenge(statement: PDLwSlackStatement, z, u1, u2, u3) -> int:
    h = sha256()
    h.update(point_bytes(statement.G))
    h.update(point_bytes(statement.Q))
    h.update(point_bytes(u1))
    for v in (statement.ek.n, statement.N_tilde, statement.h1, statement.h2,
              statement.ciphertext, z, u2, u3):
        data = v.to_bytes((v.bit_length() + 7) // 8 or 1, byteorder='big')
        h.update(len(data).to_bytes(4, byteorder='big'))
        h.update(data)
    return int.from_bytes(h.digest(), byteorder='big')


def proove(witness: PDLwSlackWitness, statement: PDLwSlackStatement) -> PDLwSlackProof:
    N = statement.ek.n
    N_sq = statement.ek.nsquare
    q3 = pow(order, 3)
    q_N_tilde = order * statement.N_tilde
    q3_N_tilde = q3 * statement.N_tilde

    alpha = sample_below(q3)
    beta = sample_range(1, N)
    rho = sample_below(q_N_tilde)
    gamma = sample_below(q3_N_tilde)

    z = commitment_unknown_order(statement.h1, statement.h2, statement.N_tilde, witness.x, rho)
    u1 = ec_scalar_mul(statement.G, alpha)
    u2 = commitment_unknown_order(N + 1, beta, N_sq, alpha, N)
    u3 = commitment_unknown_order(statement.h1, statement.h2, statement.N_tilde, alpha, gamma)

    e = _challenge(statement, z, u1, u2, u3)
    s1 = e * witness.x + alpha
    s2 = commitment_unknown_order(witness.r, beta, N, e, 1)
    s3 = e * rho + gamma
    return PDLwSlackProof(z=z, u1=u1, u2=u2, u3=u3, s1=s1, s2=s2, s3=s3)


def verify(proof: PDLwSlackProof, statement: PDLwSlackStatement) -> bool:
    N = statement.ek.n
    N_sq = statement.ek.nsquare
    N_tilde = statement.N_tilde
    if proof.u1 == O or not valid(proof.u1) or statement.Q == O or not valid(statement.Q):
        return False
    if not (0 < proof.z < N_tilde and 0 < proof.s2 < N and 0 < statement.ciphertext < N_sq):
        return False
    try:
        e = _challenge(statement, proof.z, proof.u1, proof.u2, proof.u3)

        # s1*G - e*Q
        u1_test = ec_add(ec_scalar_mul(statement.G, proof.s1), ec_inv(ec_scalar_mul(statement.Q, e)))
        u2_test = commitment_unknown_order(N + 1, proof.s2, N_sq, proof.s1, N) \
            * pow(statement.ciphertext, -e, N_sq) % N_sq
        u3_test = commitment_unknown_order(statement.h1, statement.h2, N_tilde, proof.s1, proof.s3) \
            * pow(proof.z, -e, N_tilde) % N_tilde
    except ValueError:
        # ciphertext or z not invertible
        return False
    return u1_test == proof.u1 and u2_test == proof.u2 and u3_test == proof.u3
