"""
This module is an implementation of the Schnorr's NIZK over elliptic curve SECP256k1
Please refer to https://tools.ietf.org/html/rfc8235#section-3.2

Both parties use it to prove knowledge of the scalar behind every public
share they send, long lived or ephemeral.
"""

from collections import namedtuple
from hashlib import sha256

from .ecdsa_op import O, ec_add, ec_scalar_mul, order, pub_key_from_priv, generator, valid, compressed_hex
from .rand import int_sample


SchnorrNIZK = namedtuple('SchnorrNIZK', ['V', 'A', 'r', 'c', 'user_id'])


def _challenge(V, A, user_id: bytes) -> int:
    return int.from_bytes(sha256(
        bytes.fromhex(compressed_hex(generator)) +
        bytes.fromhex(compressed_hex(V)) +
        bytes.fromhex(compressed_hex(A)) +
        user_id).digest(), byteorder='big')


def proove(secret: int, user_id: bytes = b"DEFAULT") -> SchnorrNIZK:
    """
    Non Interactive zero knowledge proof that the proover knows the secret.
    """
    temp_ecdsa_private = int_sample(order)
    temp_ecdsa_public = pub_key_from_priv(temp_ecdsa_private)
    V = pub_key_from_priv(secret)
    # calculate challenge use Fiat Shamir Transform.
    challenge = _challenge(V, temp_ecdsa_public, user_id)
    r = (secret - temp_ecdsa_private * challenge) % order
    return SchnorrNIZK(V=V, A=temp_ecdsa_public, r=r, c=challenge, user_id=user_id)


def verify(proof: SchnorrNIZK, public_share) -> bool:
    """
    Verify the above zero knowledge proof for the given public share.
    """
    if proof.V != public_share:
        return False
    for point in (proof.A, proof.V):
        if point == O or not valid(point):
            return False
    # calculate challenge again
    if proof.c != _challenge(proof.V, proof.A, proof.user_id):
        return False
    # verify V = G * [r] + A * [c]
    return proof.V == ec_add(ec_scalar_mul(generator, proof.r), ec_scalar_mul(proof.A, proof.c))
