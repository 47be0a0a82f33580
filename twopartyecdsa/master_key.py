"""
Long lived key material produced by key generation, one master key per party.

The public half is a plain immutable tuple and may be shared or serialized.
The private half is a separate type that is only reachable through
MasterKey.private_share() and is never printed.
"""

from collections import namedtuple

Party1Public = namedtuple("Party1Public", "q p1 p2 paillier_pub c_key")
Party2Public = namedtuple("Party2Public", "q p2 p1 paillier_pub c_key")


class Party1Private:
    """x1 together with the Paillier private key that decrypts c_key."""

    __slots__ = ("_x1", "_paillier_priv")

    def __init__(self, x1: int, paillier_priv):
        self._x1 = x1
        self._paillier_priv = paillier_priv

    @property
    def x1(self) -> int:
        return self._x1

    @property
    def paillier_priv(self):
        return self._paillier_priv

    def __repr__(self):
        return "Party1Private(<redacted>)"


class Party2Private:
    __slots__ = ("_x2",)

    def __init__(self, x2: int):
        self._x2 = x2

    @property
    def x2(self) -> int:
        return self._x2

    def __repr__(self):
        return "Party2Private(<redacted>)"


class _MasterKey:
    __slots__ = ("_public", "_private", "_chain_code")

    def __init__(self, public, private, chain_code: int = 0):
        object.__setattr__(self, "_public", public)
        object.__setattr__(self, "_private", private)
        object.__setattr__(self, "_chain_code", chain_code)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    @property
    def public(self):
        return self._public

    @property
    def chain_code(self) -> int:
        return self._chain_code

    @property
    def q(self):
        return self._public.q

    def private_share(self):
        return self._private

    def __repr__(self):
        return f"{type(self).__name__}(q={self._public.q!r}, chain_code={self._chain_code})"


class MasterKey1(_MasterKey):
    __slots__ = ()

    def signer(self):
        from .party_one import Signer
        return Signer(self)


class MasterKey2(_MasterKey):
    __slots__ = ()

    def signer(self):
        from .party_two import Signer
        return Signer(self)
