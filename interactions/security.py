"""
Interaction Request Authentication

SECURITY BOUNDARY - Verify the platform's Ed25519 signature.
No dispatch. No retries. No parsing of the body.

The platform signs `timestamp ++ body`:
- X-Signature-Ed25519: hex-encoded 64-byte signature
- X-Signature-Timestamp: decimal string, signed as raw ASCII bytes

A wrong signature is an outcome (AuthResult), not an exception.
"""

import binascii
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional, Union

from . import ed25519

SIGNATURE_HEADER = "X-Signature-Ed25519"
TIMESTAMP_HEADER = "X-Signature-Timestamp"


class AuthFailure(str, Enum):
    """Why a request was rejected."""

    MISSING_HEADER = "missing_header"
    MALFORMED_SIGNATURE = "malformed_signature"
    INVALID_SIGNATURE = "invalid_signature"


class AuthenticationError(Exception):
    """Request failed signature authentication."""

    def __init__(self, failure: AuthFailure, detail: str = ""):
        self.failure = failure
        self.detail = detail
        super().__init__(f"{failure.value}: {detail}" if detail else failure.value)


@dataclass(frozen=True)
class AuthResult:
    """Verdict of one authentication attempt."""

    authenticated: bool
    failure: Optional[AuthFailure] = None
    detail: str = ""

    @classmethod
    def accepted(cls) -> "AuthResult":
        return cls(authenticated=True)

    @classmethod
    def rejected(cls, failure: AuthFailure, detail: str = "") -> "AuthResult":
        return cls(authenticated=False, failure=failure, detail=detail)

    def raise_for_failure(self) -> None:
        """Raise AuthenticationError if this result is a rejection."""
        if not self.authenticated:
            raise AuthenticationError(self.failure, self.detail)


def _header_value(headers: Mapping[str, Any], name: str) -> Optional[str]:
    """
    First value of a header, matched case-insensitively.

    Accepts plain dicts, Starlette Headers, and multi-value mappings
    (header name -> list of values).
    """
    value = headers.get(name)
    if value is None:
        lowered = name.lower()
        for key, candidate in headers.items():
            if key.lower() == lowered:
                value = candidate
                break

    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    return value


def _decode_signature(signature_hex: str) -> bytes:
    """Hex-decode the signature header. Raises ValueError on bad input."""
    return binascii.unhexlify(signature_hex)


def build_signed_message(timestamp: str, body: Union[bytes, str]) -> bytes:
    """
    Reconstruct the signed message.

    Order is `timestamp ++ body`, both exactly as received.
    """
    if isinstance(body, str):
        body = body.encode("utf-8")
    return timestamp.encode("utf-8") + bytes(body)


def authenticate(
    headers: Mapping[str, Any],
    raw_body: Union[bytes, str],
    public_key: bytes,
) -> AuthResult:
    """
    Authenticate an inbound interaction request.

    Args:
        headers: Request headers (name -> value or list of values)
        raw_body: Request body bytes, untouched
        public_key: 32-byte application public key

    Returns:
        AuthResult.accepted() or AuthResult.rejected(reason)

    Raises:
        InvalidInputSize: public_key is not 32 bytes (configuration defect)
    """

    signature_hex = _header_value(headers, SIGNATURE_HEADER)
    timestamp = _header_value(headers, TIMESTAMP_HEADER)

    # Nothing is decoded unless both headers are present
    if signature_hex is None or timestamp is None:
        missing = SIGNATURE_HEADER if signature_hex is None else TIMESTAMP_HEADER
        return AuthResult.rejected(AuthFailure.MISSING_HEADER, f"Missing {missing} header")

    try:
        signature = _decode_signature(signature_hex)
    except ValueError:
        return AuthResult.rejected(AuthFailure.MALFORMED_SIGNATURE, "Signature is not valid hex")

    if len(signature) != ed25519.SIGNATURE_SIZE:
        return AuthResult.rejected(
            AuthFailure.MALFORMED_SIGNATURE,
            f"Signature must be {ed25519.SIGNATURE_SIZE} bytes, got {len(signature)}",
        )

    message = build_signed_message(timestamp, raw_body)

    if not ed25519.verify(signature, message, public_key):
        return AuthResult.rejected(AuthFailure.INVALID_SIGNATURE, "Invalid signature")

    return AuthResult.accepted()
