"""
secp256k1 arithmetic and ECDSA helpers shared by both signing parties.
Utilities for:
    1. EC Public Key generation
    2. EC point addition, negation and scalar multiplication
    3. Scalar inverse mod order and mod field size
    4. Point encodings (SEC1 compressed / uncompressed)
    5. Signature normalisation, verification and public key recovery

    Point addition is implementing:
    https://en.wikipedia.org/wiki/Elliptic_curve_point_multiplication#Point_addition

    Verification and recovery follow:
    https://en.wikipedia.org/wiki/Elliptic_Curve_Digital_Signature_Algorithm
    https://www.secg.org/sec1-v2.pdf section 4.1.6
"""

from collections import namedtuple
from hashlib import sha256

from ecdsa import SECP256k1, VerifyingKey, MalformedPointError
from ecdsa.ecdsa import Signature as EcdsaSignature

# The point at origin. This means generator * order = O
O = 'Origin'


# SECP256K1 domain params
p = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEFFFFFC2F
a = 0
b = 7
order = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
#############################


class Point(namedtuple("Point", "x y")):
    def __repr__(self):
        """Uncompressed"""
        return f"04{self.x:0>64X}{self.y:0>64X}"


generator = Point(0x79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798,
                  0x483ADA7726A3C4655DA4FBFC0E1108A8FD17B448A68554199C47D08FFB10D4B8)


def valid(P):
    """
    wiestrass curve: y^2 = x^3 + ax + b
    Determine whether we have a valid representation of a point
    on our curve.  We assume that the x and y coordinates
    are always reduced modulo p, so that we can compare
    two points for equality with a simple ==.
    """
    if P == O:
        return True
    if not isinstance(P, Point):
        return False
    return (
        0 <= P.x < p and 0 <= P.y < p and
        (P.y**2 - (P.x**3 + a*P.x + b)) % p == 0)


def scalar_inv_mod_p(x):
    if x % p == 0:
        raise ZeroDivisionError("Impossible inverse")
    return pow(x, -1, p)


def scalar_inv_mod_order(x):
    """
    Compute an inverse for x modulo order, assuming that x
    is not divisible by order.
    https://docs.python.org/3/library/functions.html#pow
    """
    if x % order == 0:
        raise ZeroDivisionError("Impossible inverse")
    return pow(x, -1, order)


def ec_inv(P):
    """
    Inverse of the point P on the elliptic curve y^2 = x^3 + ax + b.
    https://en.wikipedia.org/wiki/Elliptic_curve_point_multiplication#Point_negation
    """
    if P == O:
        return P
    return Point(P.x, (-P.y) % p)


def ec_add(P, Q):
    """
    Sum of the points P and Q on the elliptic curve y^2 = x^3 + ax + b.
    """
    if not (valid(P) and valid(Q)):
        raise ValueError("Invalid inputs")

    if P == O:
        return Q
    if Q == O:
        return P
    # A + (-A) is the point at origin, the slope below would divide by zero.
    if Q == ec_inv(P):
        return O
    if P == Q:
        lambdA = (3 * P.x**2 + a) * scalar_inv_mod_p(2 * P.y)
    else:
        lambdA = (Q.y - P.y) * scalar_inv_mod_p(Q.x - P.x)
    x = (lambdA**2 - P.x - Q.x) % p
    y = (lambdA * (P.x - x) - P.y) % p
    return Point(x, y)


def ec_scalar_mul(P, scalar):
    scalar %= order
    if not valid(P):
        raise ValueError("Invalid input point")
    cache = P
    ret = O
    # keep on doubling and only add for binary 1.
    while scalar:
        if scalar & 1:
            ret = ec_add(ret, cache)
        cache = ec_add(cache, cache)
        scalar >>= 1
    return ret


def pub_key_from_priv(private):
    return ec_scalar_mul(generator, private)


def compressed_hex(point) -> str:
    if point.y % 2 == 0:
        return f"02{point.x:0>64X}"
    return f"03{point.x:0>64X}"


def point_bytes(point) -> bytes:
    if point == O:
        raise ValueError("The point at origin has no encoding")
    return bytes.fromhex(compressed_hex(point))


def lift_x(x, odd):
    """
    Point with the given x coordinate and y parity.
    p = 3 mod 4 so the square root is a single exponentiation.
    """
    if not 0 <= x < p:
        raise ValueError("x coordinate out of range")
    alpha = (pow(x, 3, p) + a * x + b) % p
    y = pow(alpha, (p + 1) // 4, p)
    if y * y % p != alpha:
        raise ValueError("x coordinate is not on the curve")
    if y % 2 != int(odd):
        y = p - y
    return Point(x, y)


def point_from_bytes(data: bytes):
    """
    Decode a SEC1 encoded point (compressed or uncompressed).
    """
    if len(data) == 33 and data[0] in (2, 3):
        return lift_x(int.from_bytes(data[1:], byteorder='big'), data[0] == 3)
    if len(data) == 65 and data[0] == 4:
        point = Point(int.from_bytes(data[1:33], byteorder='big'),
                      int.from_bytes(data[33:], byteorder='big'))
        if not valid(point):
            raise ValueError("Point is not on the curve")
        return point
    raise ValueError(f"Bad point encoding of length {len(data)}")


Signature = namedtuple("Signature", "r s")
SignatureRecid = namedtuple("SignatureRecid", "r s recid")


class Signature(Signature):
    def __repr__(self):
        return f"{self.r:0>64X}{self.s:0>64X}"


class SignatureRecid(SignatureRecid):
    def __repr__(self):
        return f"{self.r:0>64X}{self.s:0>64X}{self.recid:0>2X}"

    def signature(self) -> Signature:
        return Signature(self.r, self.s)


def hash_message(message: bytes) -> int:
    return int.from_bytes(sha256(message).digest(), byteorder='big')


def normalize_s(s):
    """
    Low-s form, the second half of the order is the mirrored signature.
    """
    s %= order
    return min(s, order - s)


def verify(signature, Q, message: int) -> bool:
    """
    Standard ECDSA verification of (r, s) for the integer message
    digest against public key Q. Delegates to python-ecdsa.
    """
    if Q == O or not valid(Q):
        return False
    try:
        vk = VerifyingKey.from_string(bytes.fromhex(repr(Q)), curve=SECP256k1, hashfunc=sha256)
    except MalformedPointError:
        return False
    return vk.pubkey.verifies(message, EcdsaSignature(signature.r, signature.s))


def recover_public_key(signature: SignatureRecid, message: int):
    """
    Q = r^-1 (s*R - m*G) where R is rebuilt from r and the recovery id.
    """
    x = signature.r + order if signature.recid & 2 else signature.r
    R = lift_x(x, signature.recid & 1)
    r_inv = scalar_inv_mod_order(signature.r)
    sR = ec_scalar_mul(R, signature.s)
    mG = ec_inv(pub_key_from_priv(message))
    return ec_scalar_mul(ec_add(sR, mG), r_inv)
