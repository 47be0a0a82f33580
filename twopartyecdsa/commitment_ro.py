"""
Commitment scheme using a hash function(ROM) and fixed length blinding factor.

Please refer to https://eprint.iacr.org/2020/540.pdf section 2.6
"""

import secrets
import hashlib

blind_length = 32


def commit(input: bytes) -> (bytes, bytes):
    r = secrets.token_bytes(blind_length)
    return hashlib.sha3_256(input + r).digest(), r


def verify_commitment(commitment: bytes, r: bytes, input: bytes) -> bool:
    # peer supplied values, reject instead of asserting.
    if not commitment or not input or len(r) != blind_length:
        return False
    return secrets.compare_digest(hashlib.sha3_256(input + r).digest(), commitment)
