"""
Ed25519 Signature Verification

VERIFICATION ONLY - no key generation, no signing.

Pure-Python group arithmetic over the twisted Edwards curve
    -x^2 + y^2 = 1 + d*x^2*y^2  (mod 2^255 - 19)
using extended homogeneous coordinates (X, Y, Z, T) with x = X/Z, y = Y/Z, x*y = T/Z.

ref: RFC 8032, section 5.1.7
"""

import hashlib
from typing import Optional, Tuple

SIGNATURE_SIZE = 64
PUBLIC_KEY_SIZE = 32

# Field prime and group order
P = 2**255 - 19
L = 2**252 + 27742317777372353535851937790883648493

Point = Tuple[int, int, int, int]


class InvalidInputSize(ValueError):
    """Signature or public key buffer has the wrong length."""

    def __init__(self, what: str, expected: int, actual: int):
        self.what = what
        self.expected = expected
        self.actual = actual
        super().__init__(f"{what} must be {expected} bytes, got {actual}")


def _inv(x: int) -> int:
    return pow(x, P - 2, P)


D = (-121665 * _inv(121666)) % P
SQRT_M1 = pow(2, (P - 1) // 4, P)


def _recover_x(y: int, sign: int) -> Optional[int]:
    """Solve the curve equation for x, picking the root whose low bit is `sign`."""
    if y >= P:
        return None

    x2 = (y * y - 1) * _inv(D * y * y + 1) % P
    if x2 == 0:
        # x = 0 has no "negative" encoding
        if sign:
            return None
        return 0

    x = pow(x2, (P + 3) // 8, P)
    if (x * x - x2) % P != 0:
        x = x * SQRT_M1 % P
    if (x * x - x2) % P != 0:
        return None

    if (x & 1) != sign:
        x = P - x
    return x


_BASE_Y = 4 * _inv(5) % P
_BASE_X = _recover_x(_BASE_Y, 0)
BASE: Point = (_BASE_X, _BASE_Y, 1, _BASE_X * _BASE_Y % P)
IDENTITY: Point = (0, 1, 1, 0)


def point_add(p: Point, q: Point) -> Point:
    """Unified addition in extended coordinates (also valid for doubling)."""
    a = (p[1] - p[0]) * (q[1] - q[0]) % P
    b = (p[1] + p[0]) * (q[1] + q[0]) % P
    c = 2 * p[3] * q[3] * D % P
    d = 2 * p[2] * q[2] % P
    e, f, g, h = b - a, d - c, d + c, b + a
    return (e * f % P, g * h % P, f * g % P, e * h % P)


def scalar_mult(s: int, p: Point) -> Point:
    """Double-and-add, least significant bit first."""
    q = IDENTITY
    while s > 0:
        if s & 1:
            q = point_add(q, p)
        p = point_add(p, p)
        s >>= 1
    return q


def point_compress(p: Point) -> bytes:
    zinv = _inv(p[2])
    x = p[0] * zinv % P
    y = p[1] * zinv % P
    return int.to_bytes(y | ((x & 1) << 255), 32, "little")


def point_decompress(s: bytes) -> Optional[Point]:
    """
    Decode a 32-byte compressed point.

    Returns None when the encoding is not a point on the curve,
    including a sign bit that contradicts x = 0.
    """
    if len(s) != 32:
        return None
    y = int.from_bytes(s, "little")
    sign = y >> 255
    y &= (1 << 255) - 1

    x = _recover_x(y, sign)
    if x is None:
        return None
    return (x, y, 1, x * y % P)


def verify(signature: bytes, message: bytes, public_key: bytes) -> bool:
    """
    Verify an Ed25519 signature.

    Args:
        signature: 64 bytes, R (compressed point) followed by S (little-endian scalar)
        message: Arbitrary-length signed message
        public_key: 32-byte compressed point A

    Returns:
        True only if every decode step succeeds and S*B == R + k*A

    Raises:
        InvalidInputSize: signature is not 64 bytes or public_key is not 32 bytes.
            A wrong signature is never an exception, only a False.
    """
    signature = bytes(signature)
    public_key = bytes(public_key)
    message = bytes(message)

    if len(signature) != SIGNATURE_SIZE:
        raise InvalidInputSize("signature", SIGNATURE_SIZE, len(signature))
    if len(public_key) != PUBLIC_KEY_SIZE:
        raise InvalidInputSize("public key", PUBLIC_KEY_SIZE, len(public_key))

    a = point_decompress(public_key)
    if a is None:
        return False

    r_bytes = signature[:32]
    r = point_decompress(r_bytes)
    if r is None:
        return False

    s = int.from_bytes(signature[32:], "little")
    # Malleability guard
    if s >= L:
        return False

    k = int.from_bytes(hashlib.sha512(r_bytes + public_key + message).digest(), "little") % L

    lhs = scalar_mult(s, BASE)
    rhs = point_add(r, scalar_mult(k, a))
    return point_compress(lhs) == point_compress(rhs)
