"""
Party one of two party ECDSA as described here:
https://eprint.iacr.org/2017/552.pdf

Party one owns the Paillier key pair. During key generation it commits to
its share x1 first and only opens the commitment after seeing party two's
share, then hands party two c_key = Enc(x1) together with the proofs that
c_key is well formed. During signing it decrypts party two's partial
signature and finishes (r, s).

    keygen = KeyGen()
    msg1 = keygen.first_message()                # -> party two
    msg2 = keygen.second_message(p2_first_msg)   # -> party two
    master_key = keygen.master_key()
"""

import logging

from phe import paillier

from . import paillier_squarefree_nizk
from . import composite_dlog_nizk
from . import pdl_slack_nizk
from .composite_dlog_nizk import DLogStatement, PAILLIER_KEY_SIZE
from .ecdsa_op import (O, SignatureRecid, ec_scalar_mul, generator, normalize_s, order,
                       scalar_inv_mod_order, verify)
from .errors import KeyGenError, KeyGenFailure, SignError, SignFailure
from .master_key import MasterKey1, Party1Private, Party1Public
from .messages import (BlindedSignature, EphKeyGenParty1FirstMsg, KeyGenFirstMsg, KeyGenParty1Message2,
                       KeyGenSecondMsg, create_commitments, verify_decommitment, verify_dlog)
from .pdl_slack_nizk import PDLwSlackStatement, PDLwSlackWitness
from .rand import int_sample, sample_range
from .schnorr_nizk import proove, verify as verify_schnorr

logger = logging.getLogger(__name__)


def compute_pubkey(x1: int, party_two_public_share):
    return ec_scalar_mul(party_two_public_share, x1)


def _encrypt_share(ek, x1):
    """Enc(x1) and the randomness used, the PDL proof needs both."""
    while True:
        r = sample_range(1, ek.n)
        try:
            pow(r, -1, ek.n)
            break
        except ValueError:
            continue
    return ek.raw_encrypt(x1, r_value=r), r


class KeyGen:
    """Party one's side of key generation. Single use."""

    def __init__(self):
        self._x1 = int_sample(order)
        self._witness = None
        self._paillier_pub = None
        self._paillier_priv = None
        self._c_key = None
        self._party_two_public_share = None
        self._failed = False

    def _fail(self, reason):
        self._failed = True
        logger.warning("party one key generation aborted: %s", reason.value)
        raise KeyGenError(reason)

    def first_message(self) -> KeyGenFirstMsg:
        if self._failed or self._witness is not None:
            raise KeyGenError(KeyGenFailure.OUT_OF_ORDER)
        pk_commitment, zk_pok_commitment, self._witness = create_commitments(self._x1)
        logger.debug("party one key generation: commitments created")
        return KeyGenFirstMsg(pk_commitment=pk_commitment, zk_pok_commitment=zk_pok_commitment)

    def second_message(self, party_two_first_message) -> KeyGenParty1Message2:
        """
        Verify party two's DLog proof, then open the commitment and send the
        Paillier encryption of x1 with its three proofs.
        """
        if self._failed or self._witness is None or self._paillier_pub is not None:
            raise KeyGenError(KeyGenFailure.OUT_OF_ORDER)
        public_share = party_two_first_message.public_share
        if public_share == O or not verify_schnorr(party_two_first_message.d_log_proof, public_share):
            self._fail(KeyGenFailure.BAD_DLOG_PROOF)

        ek, dk = paillier.generate_paillier_keypair(n_length=PAILLIER_KEY_SIZE)
        c_key, r = _encrypt_share(ek, self._x1)
        correct_key_proof = paillier_squarefree_nizk.proove(dk.p, dk.q)

        n_tilde, h1, h2, xhi = composite_dlog_nizk.generate_h1_h2_n_tilde()
        dlog_statement = DLogStatement(N=n_tilde, g=h1, ni=h2)
        composite_dlog_proof = composite_dlog_nizk.proove(dlog_statement, xhi)

        pdl_statement = PDLwSlackStatement(ciphertext=c_key, ek=ek, Q=self._witness.public_share,
                                           G=generator, h1=h1, h2=h2, N_tilde=n_tilde)
        pdl_proof = pdl_slack_nizk.proove(PDLwSlackWitness(x=self._x1, r=r), pdl_statement)

        self._paillier_pub, self._paillier_priv, self._c_key = ek, dk, c_key
        self._party_two_public_share = public_share
        logger.debug("party one key generation: decommitted, paillier key and proofs created")
        return KeyGenParty1Message2(
            ecdh_second_message=KeyGenSecondMsg(comm_witness=self._witness),
            ek=ek,
            c_key=c_key,
            correct_key_proof=correct_key_proof,
            pdl_statement=pdl_statement,
            pdl_proof=pdl_proof,
            composite_dlog_proof=composite_dlog_proof)

    def master_key(self, chain_code: int = 0) -> MasterKey1:
        if self._failed or self._paillier_priv is None:
            raise KeyGenError(KeyGenFailure.INCOMPLETE)
        public = Party1Public(q=compute_pubkey(self._x1, self._party_two_public_share),
                              p1=self._witness.public_share,
                              p2=self._party_two_public_share,
                              paillier_pub=self._paillier_pub,
                              c_key=self._c_key)
        return MasterKey1(public, Party1Private(self._x1, self._paillier_priv), chain_code)


class Signer:
    """
    One signing attempt for party one. The ephemeral k1 is drawn in
    first_message() and dropped once the attempt ends, either way.
    """

    def __init__(self, master_key: MasterKey1):
        self._master_key = master_key
        self._k1 = None
        self._used = False

    def first_message(self) -> EphKeyGenParty1FirstMsg:
        if self._used or self._k1 is not None:
            raise SignError(SignFailure.OUT_OF_ORDER)
        self._k1 = int_sample(order)
        d_log_proof = proove(self._k1)
        return EphKeyGenParty1FirstMsg(public_share=d_log_proof.V, d_log_proof=d_log_proof)

    def _take_nonce(self):
        if self._used or self._k1 is None:
            raise SignError(SignFailure.OUT_OF_ORDER)
        k1, self._k1, self._used = self._k1, None, True
        return k1

    def _check_party_two(self, party_two_first_message, second_message):
        comm_witness = second_message.comm_witness
        if not verify_decommitment(party_two_first_message, comm_witness):
            logger.warning("party one signing aborted: %s", SignFailure.BAD_DECOMMITMENT.value)
            raise SignError(SignFailure.BAD_DECOMMITMENT)
        if comm_witness.public_share == O or not verify_dlog(comm_witness):
            logger.warning("party one signing aborted: %s", SignFailure.BAD_DLOG_PROOF.value)
            raise SignError(SignFailure.BAD_DLOG_PROOF)
        return comm_witness.public_share

    def _decrypt(self, c3):
        if not isinstance(c3, int):
            raise SignError(SignFailure.INVALID_SIGNATURE)
        return self._master_key.private_share().paillier_priv.raw_decrypt(c3) % order

    def second_message(self, party_two_sign_message, party_two_first_message, message: int) -> SignatureRecid:
        """
        Check party two's ephemeral decommitment, decrypt the partial
        signature and return a low-s signature with recovery id, verified
        against Q.
        """
        k1 = self._take_nonce()
        R2 = self._check_party_two(party_two_first_message, party_two_sign_message.second_message)

        R = ec_scalar_mul(R2, k1)
        r = R.x % order
        s_tag = scalar_inv_mod_order(k1) * self._decrypt(party_two_sign_message.partial_sig.c3) % order
        s = normalize_s(s_tag)
        recid = (R.y & 1) ^ (s != s_tag)
        if R.x >= order:
            recid |= 2
        signature = SignatureRecid(r=r, s=s, recid=recid)

        if r == 0 or s == 0 or not verify(signature, self._master_key.q, message):
            logger.warning("party one signing aborted: %s", SignFailure.INVALID_SIGNATURE.value)
            raise SignError(SignFailure.INVALID_SIGNATURE)
        logger.debug("party one signing: signature verified")
        return signature

    def blinded_second_message(self, party_two_sign_message, party_two_first_message) -> BlindedSignature:
        """
        Same checks on party two's decommitment, but the decrypted value is
        still scaled by party two's blinding factor, so it is returned as is
        and verified by whoever unblinds it.
        """
        k1 = self._take_nonce()
        R2 = self._check_party_two(party_two_first_message, party_two_sign_message.second_message)

        r = ec_scalar_mul(R2, k1).x % order
        s = scalar_inv_mod_order(k1) * self._decrypt(party_two_sign_message.partial_sig.c3) % order
        logger.debug("party one signing: blinded signature computed")
        return BlindedSignature(r=r, s=s)
