"""
Tests
"""

import pytest
import random
from hashlib import sha256
from ecdsa import SECP256k1, SigningKey
from twopartyecdsa.ecdsa_op import (O, Signature, SignatureRecid, ec_add, ec_inv, ec_scalar_mul, generator,
                                    hash_message, normalize_s, order, point_bytes, point_from_bytes,
                                    pub_key_from_priv, recover_public_key, verify)


def library_signature(secret, m):
    priv = SigningKey.from_secret_exponent(secret, SECP256k1, hashfunc=sha256)
    raw = priv.sign(m)
    return Signature(int.from_bytes(raw[:32], 'big'), int.from_bytes(raw[32:], 'big'))


def test_generator_order():
    # check if order and generator are in sync
    assert O == ec_scalar_mul(generator, order), "Generator seems off"


def test_point_addition():
    secret1 = random.randint(1, order - 1)
    secret2 = random.randint(1, order - 1)
    pub1 = pub_key_from_priv(secret1)
    pub2 = pub_key_from_priv(secret2)
    master_secret = (secret1 + secret2) % order
    assert ec_add(pub1, pub2) == pub_key_from_priv(master_secret)
    assert ec_add(pub1, ec_inv(pub1)) == O


def test_multiplicative_combination():
    x1 = random.randint(1, order - 1)
    x2 = random.randint(1, order - 1)
    assert ec_scalar_mul(pub_key_from_priv(x1), x2) == ec_scalar_mul(pub_key_from_priv(x2), x1)
    assert ec_scalar_mul(pub_key_from_priv(x1), x2) == pub_key_from_priv(x1 * x2 % order)


def test_point_encodings():
    pub = pub_key_from_priv(random.randint(1, order - 1))
    assert point_from_bytes(point_bytes(pub)) == pub
    assert point_from_bytes(bytes.fromhex(repr(pub))) == pub
    with pytest.raises(ValueError):
        point_from_bytes(b"\x02" + bytes(31))
    with pytest.raises(ValueError):
        point_bytes(O)


def test_verify_against_python_ecdsa():
    secret = 27777772222
    m = b"Nitin"
    sig = library_signature(secret, m)
    pub = pub_key_from_priv(secret)
    print(f"pub key\n{pub}\n")
    print(f"signature\n{sig}\n")
    assert verify(sig, pub, hash_message(m))
    assert verify(Signature(sig.r, normalize_s(sig.s)), pub, hash_message(m))
    assert not verify(sig, pub, hash_message(b"wrongdata"))
    assert not verify(sig, pub_key_from_priv(secret + 1), hash_message(m))


def test_normalize_s():
    s = random.randint(1, order - 1)
    assert normalize_s(s) == normalize_s(order - s)
    assert normalize_s(s) <= order // 2


def test_recover_public_key():
    secret = random.randint(1, order - 1)
    m = b"recover me"
    sig = library_signature(secret, m)
    recovered = [recover_public_key(SignatureRecid(sig.r, sig.s, recid), hash_message(m)) for recid in (0, 1)]
    assert pub_key_from_priv(secret) in recovered
