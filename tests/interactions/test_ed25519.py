"""
Ed25519 Verification Tests

RFC 8032 vectors, single-bit tampering, size preconditions, malleability.
"""

import pytest

from interactions.ed25519 import (
    BASE,
    L,
    P,
    InvalidInputSize,
    point_compress,
    point_decompress,
    verify,
)

# RFC 8032, section 7.1
RFC_VECTORS = [
    (
        "d75a980182b10ab7d54bfed3c964073a0ee172f3daa62325af021a68f707511a",
        "",
        "e5564300c360ac729086e2cc806e828a84877f1eb8e5d974d873e065224901555"
        "fb8821590a33bacc61e39701cf9b46bd25bf5f0595bbe24655141438e7a100b",
    ),
    (
        "3d4017c3e843895a92b70aa74d1b7ebc9c982ccf2ec4968cc0cd55f12af4660c",
        "72",
        "92a009a9f0d4cab8720e820b5f642540a2b27b5416503f8fb3762223ebdb69da"
        "085ac1e43e15996e458f3613d0f11d8c387b2eaeb4302aeeb00d291612bb0c00",
    ),
]


def _flip(data: bytes, bit: int) -> bytes:
    flipped = bytearray(data)
    flipped[bit // 8] ^= 1 << (bit % 8)
    return bytes(flipped)


class TestKnownVectors:
    """Standard test vectors verify."""

    @pytest.mark.parametrize("key_hex,msg_hex,sig_hex", RFC_VECTORS)
    def test_rfc8032_vector(self, key_hex, msg_hex, sig_hex):
        assert verify(bytes.fromhex(sig_hex), bytes.fromhex(msg_hex), bytes.fromhex(key_hex)) is True

    def test_signature_from_independent_signer(self, private_key, public_key):
        message = b"1700000000" + b'{"type": 1}'
        signature = private_key.sign(message)

        assert verify(signature, message, public_key) is True

    def test_accepts_bytearray_and_memoryview(self, private_key, public_key):
        message = b"hello"
        signature = private_key.sign(message)

        assert verify(bytearray(signature), memoryview(message), bytearray(public_key)) is True

    def test_base_point_encoding(self):
        assert point_compress(BASE).hex() == "58" + "66" * 31


class TestTampering:
    """Any single flipped bit invalidates the signature."""

    @pytest.fixture
    def vector(self):
        key_hex, msg_hex, sig_hex = RFC_VECTORS[1]
        return bytes.fromhex(sig_hex), bytes.fromhex(msg_hex), bytes.fromhex(key_hex)

    @pytest.mark.parametrize("bit", range(8))
    def test_flip_message_bit(self, vector, bit):
        signature, message, key = vector
        assert verify(signature, _flip(message, bit), key) is False

    @pytest.mark.parametrize("bit", range(0, 512, 37))
    def test_flip_signature_bit(self, vector, bit):
        signature, message, key = vector
        assert verify(_flip(signature, bit), message, key) is False

    @pytest.mark.parametrize("bit", list(range(0, 256, 23)) + [255])
    def test_flip_key_bit(self, vector, bit):
        signature, message, key = vector
        assert verify(signature, message, _flip(key, bit)) is False

    def test_swapped_concatenation_fails(self, private_key, public_key):
        timestamp, body = b"1700000000", b'{"type": 2}'
        signature = private_key.sign(timestamp + body)

        assert verify(signature, timestamp + body, public_key) is True
        assert verify(signature, body + timestamp, public_key) is False


class TestMalleability:
    """Non-reduced S is rejected even though the group equation still holds."""

    def test_s_plus_l_rejected(self):
        key_hex, msg_hex, sig_hex = RFC_VECTORS[0]
        signature = bytes.fromhex(sig_hex)
        s = int.from_bytes(signature[32:], "little")
        malleated = signature[:32] + (s + L).to_bytes(32, "little")

        assert verify(malleated, bytes.fromhex(msg_hex), bytes.fromhex(key_hex)) is False

    def test_s_all_ones_rejected(self):
        key_hex, msg_hex, sig_hex = RFC_VECTORS[0]
        signature = bytes.fromhex(sig_hex)[:32] + b"\xff" * 32

        assert verify(signature, bytes.fromhex(msg_hex), bytes.fromhex(key_hex)) is False


class TestInputSizes:
    """Wrong buffer sizes are a caller error, never a boolean."""

    @pytest.mark.parametrize("length", [0, 32, 63, 65, 128])
    def test_bad_signature_length(self, length):
        with pytest.raises(InvalidInputSize) as exc_info:
            verify(b"\x00" * length, b"msg", b"\x00" * 32)

        assert exc_info.value.expected == 64
        assert exc_info.value.actual == length

    @pytest.mark.parametrize("length", [0, 31, 33, 64])
    def test_bad_key_length(self, length):
        with pytest.raises(InvalidInputSize) as exc_info:
            verify(b"\x00" * 64, b"msg", b"\x00" * length)

        assert exc_info.value.expected == 32

    def test_invalid_input_size_is_value_error(self):
        with pytest.raises(ValueError):
            verify(b"", b"", b"")


class TestPointDecoding:
    """Bad encodings are authentication failures, not crashes."""

    def test_round_trip_base_point(self):
        decoded = point_decompress(point_compress(BASE))
        assert decoded is not None
        assert point_compress(decoded) == point_compress(BASE)

    def test_negative_zero_rejected(self):
        # y = 1 gives x = 0, which has no "negative" encoding
        encoding = b"\x01" + b"\x00" * 30 + b"\x80"
        assert point_decompress(encoding) is None

    def test_negative_zero_at_y_minus_one_rejected(self):
        # y = p - 1 is the other point with x = 0
        encoding = ((P - 1) | (1 << 255)).to_bytes(32, "little")
        assert point_decompress(encoding) is None

    def test_y_minus_one_decodes_with_zero_x(self):
        point = point_decompress((P - 1).to_bytes(32, "little"))
        assert point is not None
        assert point[0] == 0

    def test_non_canonical_y_rejected(self):
        assert point_decompress(P.to_bytes(32, "little")) is None

    def test_undecodable_key_returns_false(self):
        key = b"\x01" + b"\x00" * 30 + b"\x80"
        key_hex, msg_hex, sig_hex = RFC_VECTORS[0]

        assert verify(bytes.fromhex(sig_hex), b"", key) is False

    def test_undecodable_r_returns_false(self):
        key_hex, msg_hex, sig_hex = RFC_VECTORS[0]
        signature = P.to_bytes(32, "little") + bytes.fromhex(sig_hex)[32:]

        assert verify(signature, b"", bytes.fromhex(key_hex)) is False
