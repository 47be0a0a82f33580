"""
Non interactive proof that a Paillier modulus was generated correctly,
i.e. N is square free so the Paillier map is a bijection.

Implementation of Section 3.2 of the below:
https://eprint.iacr.org/2018/057.pdf
"""

from functools import lru_cache
from hashlib import sha256
from typing import List

import math


SALT_STRING = b"KZen"

# below values are from sections 6.2.3
# https://eprint.iacr.org/2018/987.pdf
m = 11
alpha = 6370


def i2osp(x: int, xLen: int) -> bytes:
    """
    https://tools.ietf.org/html/rfc8017#section-4.1
    """
    if xLen < 0 or x >= pow(256, xLen):
        raise ValueError("Input integer is too big for the xLen.")
    # need to return big endian of the integer left padded with zero bytes.
    return x.to_bytes(xLen, byteorder='big')


def mgf1(seed: bytes, mask_len: int) -> bytes:
    """
    This implements the below:
    https://tools.ietf.org/html/rfc8017#appendix-B.2.1
    """
    if mask_len > pow(2, 32):
        raise ValueError("Mask Length is too long.")
    hlen = 32  # SHA-256
    res = bytearray()
    for i in range(math.ceil(mask_len / hlen)):
        res.extend(sha256(seed + i2osp(i, 4)).digest())
    return bytes(res[:mask_len])


def fiat_shamir_seed(public_key_bytes, salt, index):
    return sha256(public_key_bytes + salt + index.to_bytes(4, byteorder='big')).digest()


def calc_rho_vec(N, salt, m):
    rho_vec = []
    byte_size_N = math.ceil(N.bit_length()/8)
    for index in range(m):
        seed = fiat_shamir_seed(N.to_bytes(byte_size_N, byteorder='big'), salt, index)
        rho_i = int.from_bytes(mgf1(seed, byte_size_N), byteorder='big') % N
        rho_vec.append(rho_i)
    return rho_vec


def calc_sigma_vec_from_rho_vec(rho_vec, totient, N):
    N_inv_mod_totient = pow(N, -1, totient)
    return [pow(rho, N_inv_mod_totient, N) for rho in rho_vec]


def proove(p: int, q: int, salt: bytes = SALT_STRING) -> List[int]:
    """
    This function will return the Nth roots of random points.
    These can later be verified by verifiers.

    The points are determinsitic and that happens using the
    Fiat - Shamir transform as described in section 4:
    https://eprint.iacr.org/2018/057.pdf
    """
    if p == q:
        raise ValueError("p and q must be distinct primes")
    totient = (p-1) * (q-1)
    N = p * q
    return calc_sigma_vec_from_rho_vec(calc_rho_vec(N, salt, m), totient, N)


@lru_cache(maxsize=None)
def calc_allprimes_under_alpha(alpha: int) -> List[int]:
    # sieve of eratosthenes
    sieve = bytearray([1]) * (alpha + 1)
    sieve[0:2] = b"\x00\x00"
    for i in range(2, math.isqrt(alpha) + 1):
        if sieve[i]:
            sieve[i*i::i] = bytearray(len(sieve[i*i::i]))
    return [i for i, is_prime in enumerate(sieve) if is_prime]


def verify(proof: List[int], N: int, salt: bytes = SALT_STRING) -> bool:
    if N <= 1:
        return False
    product_all_primes_less_than_alpha = math.prod(calc_allprimes_under_alpha(alpha))
    # check that N is not divisible by any prime less than alpha
    if math.gcd(product_all_primes_less_than_alpha, N) != 1:
        return False
    rho_vec = calc_rho_vec(N, salt, m)
    if len(rho_vec) != len(proof):
        return False
    for i, num in enumerate(proof):
        if not 0 <= num < N:
            return False
        if rho_vec[i] != pow(num, N, N):
            return False
    return True
