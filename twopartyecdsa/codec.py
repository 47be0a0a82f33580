"""
JSON encoding for everything the two parties send each other, and for the
public half of a master key.

Named tuples become objects tagged with "__type__", points travel as SEC1
compressed hex, byte strings as hex and Paillier public keys as their
modulus. Integers stay JSON numbers of arbitrary size. Points are checked
to be on the curve when decoded.
"""

import json

from phe import paillier

from .composite_dlog_nizk import CompositeDLogProof, DLogStatement
from .ecdsa_op import Point, Signature, SignatureRecid, compressed_hex, point_from_bytes
from .master_key import Party1Public, Party2Public
from .messages import (BlindedSignMessage, BlindedSignature, CommWitness, EphKeyGenFirstMsg,
                       EphKeyGenParty1FirstMsg, EphKeyGenSecondMsg, KeyGenFirstMsg, KeyGenParty1Message2,
                       KeyGenParty2FirstMsg, KeyGenSecondMsg, PaillierPublic, PartialBlindedSig, PartialSig,
                       Party2SecondMessage, SignMessage)
from .pdl_slack_nizk import PDLwSlackProof, PDLwSlackStatement
from .schnorr_nizk import SchnorrNIZK

TYPE_KEY = "__type__"

_TUPLE_TYPES = {cls.__name__: cls for cls in (
    BlindedSignMessage, BlindedSignature, CommWitness, CompositeDLogProof, DLogStatement,
    EphKeyGenFirstMsg, EphKeyGenParty1FirstMsg, EphKeyGenSecondMsg, KeyGenFirstMsg,
    KeyGenParty1Message2, KeyGenParty2FirstMsg, KeyGenSecondMsg, PaillierPublic, PartialBlindedSig,
    PartialSig, Party1Public, Party2Public, Party2SecondMessage, PDLwSlackProof, PDLwSlackStatement,
    SchnorrNIZK, Signature, SignatureRecid, SignMessage,
)}


def _encode(obj):
    if isinstance(obj, Point):
        return {TYPE_KEY: "Point", "hex": compressed_hex(obj)}
    if isinstance(obj, paillier.PaillierPublicKey):
        return {TYPE_KEY: "PaillierPublicKey", "n": obj.n}
    if isinstance(obj, bytes):
        return {TYPE_KEY: "bytes", "hex": obj.hex()}
    if isinstance(obj, tuple) and type(obj).__name__ in _TUPLE_TYPES:
        encoded = {TYPE_KEY: type(obj).__name__}
        for field in obj._fields:
            encoded[field] = _encode(getattr(obj, field))
        return encoded
    if isinstance(obj, (list, tuple)):
        return [_encode(v) for v in obj]
    if isinstance(obj, int) and not isinstance(obj, bool):
        return obj
    raise TypeError(f"Cannot encode {type(obj).__name__}")


def _decode_object(d):
    type_name = d.get(TYPE_KEY)
    if type_name is None:
        raise ValueError("Untagged object")
    try:
        if type_name == "Point":
            return point_from_bytes(bytes.fromhex(d["hex"]))
        if type_name == "PaillierPublicKey":
            if not isinstance(d["n"], int) or d["n"] <= 1:
                raise ValueError("Bad Paillier modulus")
            return paillier.PaillierPublicKey(d["n"])
        if type_name == "bytes":
            return bytes.fromhex(d["hex"])
        if type_name not in _TUPLE_TYPES:
            raise ValueError(f"Unknown type {type_name}")
        cls = _TUPLE_TYPES[type_name]
        return cls(**{field: d[field] for field in cls._fields})
    except KeyError as e:
        raise ValueError(f"Malformed {type_name}: missing {e}") from e
    except TypeError as e:
        raise ValueError(f"Malformed {type_name}: {e}") from e


def to_json(obj) -> str:
    return json.dumps(_encode(obj))


def from_json(text: str):
    return json.loads(text, object_hook=_decode_object)
