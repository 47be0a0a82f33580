"""
Party two of two party ECDSA as described here:
https://eprint.iacr.org/2017/552.pdf

Party two never sees a Paillier private key. It checks that c_key really
encrypts party one's committed share, and during signing computes the
partial signature homomorphically on top of c_key:

    c3 = Enc(rho*q + k2^-1 * m) * c_key^(k2^-1 * r * x2)

which party one decrypts to k2^-1 * (m + r * x1 * x2).
"""

import logging

from . import composite_dlog_nizk
from . import paillier_squarefree_nizk
from . import pdl_slack_nizk
from .composite_dlog_nizk import DLogStatement, PAILLIER_KEY_SIZE
from .ecdsa_op import O, Signature, ec_scalar_mul, generator, normalize_s, order, scalar_inv_mod_order
from .errors import KeyGenError, KeyGenFailure, SignError, SignFailure
from .master_key import MasterKey2, Party2Private, Party2Public
from .messages import (BlindedSignMessage, EphKeyGenFirstMsg, EphKeyGenSecondMsg, KeyGenParty2FirstMsg,
                       PaillierPublic, PartialBlindedSig, PartialSig, Party2SecondMessage, SignMessage,
                       create_commitments, verify_decommitment, verify_dlog)
from .paillier_squarefree_nizk import SALT_STRING
from .rand import int_sample, sample_below
from .schnorr_nizk import proove, verify as verify_schnorr

logger = logging.getLogger(__name__)


def compute_pubkey(x2: int, party_one_public_share):
    return ec_scalar_mul(party_one_public_share, x2)


def pdl_verify(composite_dlog_proof, pdl_statement, pdl_proof, paillier_public, party_one_public_share) -> bool:
    """
    c_key encrypts the discrete log of party one's share, and the (N~, h1, h2)
    setup the proof is built on is well formed.
    """
    if (pdl_statement.ek.n != paillier_public.ek.n or
            pdl_statement.ciphertext != paillier_public.encrypted_secret_share or
            pdl_statement.Q != party_one_public_share or
            pdl_statement.G != generator):
        return False
    dlog_statement = DLogStatement(N=pdl_statement.N_tilde, g=pdl_statement.h1, ni=pdl_statement.h2)
    return (composite_dlog_nizk.verify(composite_dlog_proof, dlog_statement) and
            pdl_slack_nizk.verify(pdl_proof, pdl_statement))


class KeyGen:
    """
    Party two's side of key generation. Pass secret_share to restore a
    known x2 instead of sampling a fresh one.
    """

    def __init__(self, secret_share: int = None):
        if secret_share is None:
            self._x2 = int_sample(order)
        else:
            self._x2 = secret_share % order
            if self._x2 == 0:
                raise ValueError("secret share must be non zero mod the group order")
        self._first_message = None
        self._paillier_public = None
        self._party_one_public_share = None
        self._failed = False

    def _fail(self, reason):
        self._failed = True
        logger.warning("party two key generation aborted: %s", reason.value)
        raise KeyGenError(reason)

    def first_message(self) -> KeyGenParty2FirstMsg:
        if self._failed or self._first_message is not None:
            raise KeyGenError(KeyGenFailure.OUT_OF_ORDER)
        d_log_proof = proove(self._x2)
        self._first_message = KeyGenParty2FirstMsg(public_share=d_log_proof.V, d_log_proof=d_log_proof)
        return self._first_message

    def second_message(self, party_one_first_message, party_one_second_message,
                       salt: bytes = SALT_STRING) -> Party2SecondMessage:
        """
        Check party one's decommitment, DLog proof, PDL-with-slack proof and
        correct key proof, in that order. The first failure aborts.
        """
        if self._failed or self._first_message is None or self._paillier_public is not None:
            raise KeyGenError(KeyGenFailure.OUT_OF_ORDER)
        comm_witness = party_one_second_message.ecdh_second_message.comm_witness
        if not verify_decommitment(party_one_first_message, comm_witness):
            self._fail(KeyGenFailure.BAD_DECOMMITMENT)
        if comm_witness.public_share == O or not verify_dlog(comm_witness):
            self._fail(KeyGenFailure.BAD_DLOG_PROOF)

        paillier_public = PaillierPublic(ek=party_one_second_message.ek,
                                         encrypted_secret_share=party_one_second_message.c_key)
        if not pdl_verify(party_one_second_message.composite_dlog_proof,
                          party_one_second_message.pdl_statement,
                          party_one_second_message.pdl_proof,
                          paillier_public,
                          comm_witness.public_share):
            self._fail(KeyGenFailure.BAD_PDL_PROOF)
        # plaintexts of size q^3 must not wrap around a short modulus
        if (paillier_public.ek.n.bit_length() < PAILLIER_KEY_SIZE - 1 or
                not paillier_squarefree_nizk.verify(party_one_second_message.correct_key_proof,
                                                    paillier_public.ek.n, salt)):
            self._fail(KeyGenFailure.BAD_CORRECT_KEY_PROOF)

        self._paillier_public = paillier_public
        self._party_one_public_share = comm_witness.public_share
        logger.debug("party two key generation: party one's proofs verified")
        return Party2SecondMessage(paillier_public=paillier_public)

    def master_key(self, chain_code: int = 0) -> MasterKey2:
        if self._failed or self._paillier_public is None:
            raise KeyGenError(KeyGenFailure.INCOMPLETE)
        public = Party2Public(q=compute_pubkey(self._x2, self._party_one_public_share),
                              p2=self._first_message.public_share,
                              p1=self._party_one_public_share,
                              paillier_pub=self._paillier_public.ek,
                              c_key=self._paillier_public.encrypted_secret_share)
        return MasterKey2(public, Party2Private(self._x2), chain_code)


class BlindingFactor:
    """
    Multiplicative mask on a blinded partial signature. Drawn inside
    Signer.blinded_second_message() and good for unblinding one signature.
    """

    def __init__(self, value: int):
        self._value = value
        self._used = False

    def unblind(self, blinded_signature) -> Signature:
        if self._used:
            raise SignError(SignFailure.OUT_OF_ORDER)
        self._used = True
        s = blinded_signature.s * scalar_inv_mod_order(self._value) % order
        return Signature(r=blinded_signature.r, s=normalize_s(s))

    def __repr__(self):
        return "BlindingFactor(<redacted>)"


class Signer:
    """
    One signing attempt for party two. k2 and its commitment witness are
    created in first_message() and released in the second message.
    """

    def __init__(self, master_key: MasterKey2):
        self._master_key = master_key
        self._k2 = None
        self._witness = None
        self._used = False

    def first_message(self) -> EphKeyGenFirstMsg:
        if self._used or self._k2 is not None:
            raise SignError(SignFailure.OUT_OF_ORDER)
        self._k2 = int_sample(order)
        pk_commitment, zk_pok_commitment, self._witness = create_commitments(self._k2)
        return EphKeyGenFirstMsg(pk_commitment=pk_commitment, zk_pok_commitment=zk_pok_commitment)

    def _partial_sig(self, party_one_first_message, message: int, blinding: int = 1):
        if self._used or self._k2 is None:
            raise SignError(SignFailure.OUT_OF_ORDER)
        k2, witness = self._k2, self._witness
        self._k2, self._witness, self._used = None, None, True

        R1 = party_one_first_message.public_share
        if R1 == O or not verify_schnorr(party_one_first_message.d_log_proof, R1):
            logger.warning("party two signing aborted: %s", SignFailure.BAD_DLOG_PROOF.value)
            raise SignError(SignFailure.BAD_DLOG_PROOF)

        public = self._master_key.public
        ek = public.paillier_pub
        r = ec_scalar_mul(R1, k2).x % order
        if r == 0:
            raise SignError(SignFailure.INVALID_SIGNATURE)
        rho = sample_below(order * order)
        k2_inv = scalar_inv_mod_order(k2)
        partial_sig = rho * order + blinding * k2_inv * message % order
        c1 = ek.raw_encrypt(partial_sig)
        v = blinding * k2_inv * r * self._master_key.private_share().x2 % order
        c2 = pow(public.c_key, v, ek.nsquare)
        c3 = c1 * c2 % ek.nsquare
        return c3, EphKeyGenSecondMsg(comm_witness=witness)

    def second_message(self, party_one_first_message, message: int) -> SignMessage:
        c3, second_message = self._partial_sig(party_one_first_message, message)
        logger.debug("party two signing: partial signature computed")
        return SignMessage(partial_sig=PartialSig(c3=c3), second_message=second_message)

    def blinded_second_message(self, party_one_first_message, message: int):
        """
        Partial signature scaled by a fresh blinding factor b. Party one
        learns only b*s; the returned BlindingFactor recovers s.
        """
        b = int_sample(order)
        c3, second_message = self._partial_sig(party_one_first_message, message, b)
        logger.debug("party two signing: blinded partial signature computed")
        return (BlindedSignMessage(partial_sig=PartialBlindedSig(c3=c3), second_message=second_message),
                BlindingFactor(b))
