"""
Errors raised by the two party key generation and signing handshakes.

Primitive verifiers only ever answer True/False, the protocol layer turns a
failed check into one of the exceptions below and stops the handshake.
"""

from enum import Enum


class KeyGenFailure(Enum):
    BAD_DLOG_PROOF = "bad discrete log proof"
    BAD_DECOMMITMENT = "bad decommitment"
    BAD_PDL_PROOF = "bad decryptable-with-slack proof"
    BAD_CORRECT_KEY_PROOF = "bad correct paillier key proof"
    OUT_OF_ORDER = "message requested out of order"
    INCOMPLETE = "key generation did not complete"


class SignFailure(Enum):
    BAD_DLOG_PROOF = "bad discrete log proof"
    BAD_DECOMMITMENT = "bad decommitment"
    INVALID_SIGNATURE = "signature does not verify"
    OUT_OF_ORDER = "message requested out of order"


class ProtocolError(Exception):
    def __init__(self, reason):
        super().__init__(reason.value)
        self.reason = reason


class KeyGenError(ProtocolError):
    pass


class SignError(ProtocolError):
    pass
