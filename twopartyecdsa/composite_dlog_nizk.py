"""
Proof of knowledge of a discrete log modulo a composite N of unknown
factorisation (Girault's identification scheme made non interactive).

Please refer to https://eprint.iacr.org/2017/552.pdf section 6 and
http://www.cs.tau.ac.il/~fiat/crypt07/papers/Girault1.pdf

The statement is (N, g, ni) with ni = g^-secret mod N. Party one uses it to
show the (N~, h1, h2) setup of the PDL-with-slack proof is well formed.
"""

from collections import namedtuple
from hashlib import sha256

from phe import paillier

from .rand import sample_below

# Bit lengths: challenge is a SHA-256 output, the nonce gets extra
# statistical hiding on top of |N| + |e|.
SLACK_BITS = 256
STATISTICAL_BITS = 128
PAILLIER_KEY_SIZE = 2048

DLogStatement = namedtuple("DLogStatement", "N g ni")
CompositeDLogProof = namedtuple("CompositeDLogProof", "x y")


def _int_bytes(x: int) -> bytes:
    return x.to_bytes((x.bit_length() + 7) // 8 or 1, byteorder='big')


def _challenge(x, statement: DLogStatement) -> int:
    h = sha256()
    for v in (x, statement.g, statement.N, statement.ni):
        data = _int_bytes(v)
        h.update(len(data).to_bytes(4, byteorder='big'))
        h.update(data)
    return int.from_bytes(h.digest(), byteorder='big')


def proove(statement: DLogStatement, secret: int) -> CompositeDLogProof:
    R = 1 << (statement.N.bit_length() + SLACK_BITS + STATISTICAL_BITS)
    r = sample_below(R)
    x = pow(statement.g, r, statement.N)
    e = _challenge(x, statement)
    y = r + e * secret
    return CompositeDLogProof(x=x, y=y)


def verify(proof: CompositeDLogProof, statement: DLogStatement) -> bool:
    N = statement.N
    if N <= 1 or N.bit_length() < PAILLIER_KEY_SIZE - 1:
        return False
    if not (1 < statement.g < N and 1 < statement.ni < N):
        return False
    if not 0 < proof.x < N or proof.y < 0:
        return False
    e = _challenge(proof.x, statement)
    g_y = pow(statement.g, proof.y, N)
    ni_e = pow(statement.ni, e, N)
    return g_y * ni_e % N == proof.x


def generate_h1_h2_n_tilde(key_size: int = PAILLIER_KEY_SIZE):
    """
    Fresh RSA modulus N~ with generators h1, h2 = h1^xhi. Returns
    (N~, h1, h2, secret) where h1^secret * h2 = 1 mod N~.
    """
    _pub, priv = paillier.generate_paillier_keypair(n_length=key_size)
    n_tilde = priv.p * priv.q
    phi = (priv.p - 1) * (priv.q - 1)
    h1 = 0
    while h1 <= 1:
        h1 = sample_below(n_tilde)
    while True:
        xhi = sample_below(phi)
        try:
            pow(xhi, -1, phi)
            break
        except ValueError:
            continue
    h2 = pow(h1, xhi, n_tilde)
    return n_tilde, h1, h2, phi - xhi
