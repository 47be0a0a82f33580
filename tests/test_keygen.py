"""
Tests
"""

import random

import pytest

from twopartyecdsa import party_one, party_two
from twopartyecdsa.ecdsa_op import order, pub_key_from_priv
from twopartyecdsa.errors import KeyGenError, KeyGenFailure
from twopartyecdsa.master_key import MasterKey1, MasterKey2


def test_key_gen(master_keys):
    master_key1, master_key2 = master_keys
    assert isinstance(master_key1, MasterKey1)
    assert isinstance(master_key2, MasterKey2)
    # both parties end up with the same joint public key
    assert master_key1.public.q == master_key2.public.q
    assert master_key1.public.p1 == master_key2.public.p1
    assert master_key1.public.p2 == master_key2.public.p2
    assert master_key1.public.c_key == master_key2.public.c_key
    assert master_key1.public.paillier_pub.n == master_key2.public.paillier_pub.n

    x1 = master_key1.private_share().x1
    x2 = master_key2.private_share().x2
    assert master_key1.public.p1 == pub_key_from_priv(x1)
    assert master_key1.public.q == pub_key_from_priv(x1 * x2 % order)
    # c_key decrypts to party one's share
    paillier_priv = master_key1.private_share().paillier_priv
    assert paillier_priv.raw_decrypt(master_key1.public.c_key) == x1


def test_key_gen_with_fixed_secret_share(keygen):
    secret_share = random.randint(1, order - 1)
    master_key1, master_key2 = keygen(secret_share, chain_code=7)
    assert master_key2.private_share().x2 == secret_share
    assert master_key2.public.p2 == pub_key_from_priv(secret_share)
    assert master_key1.public.q == master_key2.public.q
    assert master_key1.chain_code == master_key2.chain_code == 7


def test_fixed_secret_share_must_be_non_zero():
    with pytest.raises(ValueError):
        party_two.KeyGen(order)


def test_master_key_is_immutable(master_keys):
    master_key1, master_key2 = master_keys
    with pytest.raises(AttributeError):
        master_key1.chain_code = 1
    with pytest.raises(AttributeError):
        master_key2.public = None
    assert str(master_key2.private_share().x2) not in repr(master_key2)
    assert "redacted" in repr(master_key1.private_share())


def check_party_two_rejects(first, second, reason, **kwargs):
    p2 = party_two.KeyGen()
    p2.first_message()
    with pytest.raises(KeyGenError) as e:
        p2.second_message(first, second, **kwargs)
    assert e.value.reason == reason
    # no master key after a failure, and the session stays dead
    with pytest.raises(KeyGenError):
        p2.master_key()
    with pytest.raises(KeyGenError):
        p2.second_message(first, second)


def test_party_two_accepts_honest_party_one(party_one_transcript):
    first, second = party_one_transcript
    p2 = party_two.KeyGen()
    p2.first_message()
    result = p2.second_message(first, second)
    assert result.paillier_public.encrypted_secret_share == second.c_key
    assert p2.master_key().public.p1 == second.ecdh_second_message.comm_witness.public_share


def test_bad_correct_key_proof(party_one_transcript):
    first, second = party_one_transcript
    proof = list(second.correct_key_proof)
    proof[0] = (proof[0] + 1) % second.ek.n
    check_party_two_rejects(first, second._replace(correct_key_proof=proof),
                            KeyGenFailure.BAD_CORRECT_KEY_PROOF)


def test_correct_key_proof_salt_mismatch(party_one_transcript):
    first, second = party_one_transcript
    check_party_two_rejects(first, second, KeyGenFailure.BAD_CORRECT_KEY_PROOF, salt=b"polysign")


def test_bad_decommitment(party_one_transcript):
    first, second = party_one_transcript
    witness = second.ecdh_second_message.comm_witness
    blind = bytearray(witness.pk_commitment_blind_factor)
    blind[0] ^= 1
    bad_witness = witness._replace(pk_commitment_blind_factor=bytes(blind))
    bad_second = second._replace(ecdh_second_message=second.ecdh_second_message._replace(comm_witness=bad_witness))
    check_party_two_rejects(first, bad_second, KeyGenFailure.BAD_DECOMMITMENT)


def test_equivocated_public_share(party_one_transcript):
    first, second = party_one_transcript
    # party one cannot swap its share after seeing party two's
    witness = second.ecdh_second_message.comm_witness._replace(public_share=pub_key_from_priv(5))
    bad_second = second._replace(ecdh_second_message=second.ecdh_second_message._replace(comm_witness=witness))
    check_party_two_rejects(first, bad_second, KeyGenFailure.BAD_DECOMMITMENT)


def test_bad_pdl_proof(party_one_transcript):
    first, second = party_one_transcript
    # c_key replaced by an encryption of another value
    c_key = second.ek.raw_encrypt(12345)
    check_party_two_rejects(first, second._replace(c_key=c_key), KeyGenFailure.BAD_PDL_PROOF)

    proof = second.pdl_proof._replace(s1=second.pdl_proof.s1 + 1)
    check_party_two_rejects(first, second._replace(pdl_proof=proof), KeyGenFailure.BAD_PDL_PROOF)

    composite = second.composite_dlog_proof._replace(y=second.composite_dlog_proof.y + 1)
    check_party_two_rejects(first, second._replace(composite_dlog_proof=composite), KeyGenFailure.BAD_PDL_PROOF)


def test_party_one_rejects_bad_dlog_proof():
    p1 = party_one.KeyGen()
    p1.first_message()
    p2_first = party_two.KeyGen().first_message()
    bad = p2_first._replace(public_share=pub_key_from_priv(3))
    with pytest.raises(KeyGenError) as e:
        p1.second_message(bad)
    assert e.value.reason == KeyGenFailure.BAD_DLOG_PROOF
    with pytest.raises(KeyGenError) as e:
        p1.master_key()
    assert e.value.reason == KeyGenFailure.INCOMPLETE


def test_key_gen_out_of_order():
    p1 = party_one.KeyGen()
    p2 = party_two.KeyGen()
    with pytest.raises(KeyGenError) as e:
        p1.second_message(p2.first_message())
    assert e.value.reason == KeyGenFailure.OUT_OF_ORDER
    p1.first_message()
    with pytest.raises(KeyGenError):
        p1.first_message()
    with pytest.raises(KeyGenError):
        p2.first_message()
    with pytest.raises(KeyGenError) as e:
        p2.master_key()
    assert e.value.reason == KeyGenFailure.INCOMPLETE


def test_short_paillier_modulus_rejected(monkeypatch):
    # honest proofs over a 512 bit Paillier key: the q^3 sized signing
    # plaintexts would wrap around N
    monkeypatch.setattr(party_one, "PAILLIER_KEY_SIZE", 512)
    p1 = party_one.KeyGen()
    first = p1.first_message()
    second = p1.second_message(party_two.KeyGen().first_message())
    assert second.ek.n.bit_length() <= 512
    check_party_two_rejects(first, second, KeyGenFailure.BAD_CORRECT_KEY_PROOF)
