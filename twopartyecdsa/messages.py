"""
Every message that crosses the boundary between party one and party two.

Both party modules import from here and never from each other. Naming
follows Lindell's "Fast Secure Two-Party ECDSA Signing":
https://eprint.iacr.org/2017/552.pdf

    key generation                 signing
    P1 -> P2  KeyGenFirstMsg       P2 -> P1  EphKeyGenFirstMsg
    P2 -> P1  KeyGenParty2FirstMsg P1 -> P2  EphKeyGenParty1FirstMsg
    P1 -> P2  KeyGenParty1Message2 P2 -> P1  SignMessage / BlindedSignMessage
"""

from collections import namedtuple

from .commitment_ro import commit, verify_commitment
from .ecdsa_op import point_bytes, pub_key_from_priv
from .schnorr_nizk import proove, verify

# Opening of a (pk_commitment, zk_pok_commitment) pair.
CommWitness = namedtuple("CommWitness", "pk_commitment_blind_factor zk_pok_blind_factor public_share d_log_proof")

# key generation
KeyGenFirstMsg = namedtuple("KeyGenFirstMsg", "pk_commitment zk_pok_commitment")
KeyGenParty2FirstMsg = namedtuple("KeyGenParty2FirstMsg", "public_share d_log_proof")
KeyGenSecondMsg = namedtuple("KeyGenSecondMsg", "comm_witness")
KeyGenParty1Message2 = namedtuple(
    "KeyGenParty1Message2",
    "ecdh_second_message ek c_key correct_key_proof pdl_statement pdl_proof composite_dlog_proof")
PaillierPublic = namedtuple("PaillierPublic", "ek encrypted_secret_share")
Party2SecondMessage = namedtuple("Party2SecondMessage", "paillier_public")

# signing
EphKeyGenFirstMsg = namedtuple("EphKeyGenFirstMsg", "pk_commitment zk_pok_commitment")
EphKeyGenParty1FirstMsg = namedtuple("EphKeyGenParty1FirstMsg", "public_share d_log_proof")
EphKeyGenSecondMsg = namedtuple("EphKeyGenSecondMsg", "comm_witness")
PartialSig = namedtuple("PartialSig", "c3")
PartialBlindedSig = namedtuple("PartialBlindedSig", "c3")
SignMessage = namedtuple("SignMessage", "partial_sig second_message")
BlindedSignMessage = namedtuple("BlindedSignMessage", "partial_sig second_message")
BlindedSignature = namedtuple("BlindedSignature", "r s")


def create_commitments(secret: int, user_id: bytes = b"DEFAULT"):
    """
    Commit to the public share of `secret` and to the random point of its
    DLog proof. Returns the two commitments and the witness that opens them.
    """
    public_share = pub_key_from_priv(secret)
    d_log_proof = proove(secret, user_id)
    pk_commitment, pk_blind = commit(point_bytes(public_share))
    zk_pok_commitment, zk_pok_blind = commit(point_bytes(d_log_proof.A))
    witness = CommWitness(pk_commitment_blind_factor=pk_blind,
                          zk_pok_blind_factor=zk_pok_blind,
                          public_share=public_share,
                          d_log_proof=d_log_proof)
    return pk_commitment, zk_pok_commitment, witness


def verify_decommitment(first_message, comm_witness: CommWitness) -> bool:
    """Both commitments of first_message open to comm_witness."""
    try:
        pk_bytes = point_bytes(comm_witness.public_share)
        zk_bytes = point_bytes(comm_witness.d_log_proof.A)
    except (ValueError, AttributeError):
        return False
    return (verify_commitment(first_message.pk_commitment,
                              comm_witness.pk_commitment_blind_factor, pk_bytes) and
            verify_commitment(first_message.zk_pok_commitment,
                              comm_witness.zk_pok_blind_factor, zk_bytes))


def verify_dlog(comm_witness: CommWitness) -> bool:
    return verify(comm_witness.d_log_proof, comm_witness.public_share)
