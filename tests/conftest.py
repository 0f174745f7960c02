"""Pytest configuration and fixtures."""

import json
import sys
from pathlib import Path

import pytest
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

# Add project root to sys.path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from infra.config import InteractionsConfig  # noqa: E402

TEST_SEED = bytes(range(32))
TEST_TIMESTAMP = "1700000000"


@pytest.fixture
def private_key():
    """Stands in for the platform's signing key."""
    return Ed25519PrivateKey.from_private_bytes(TEST_SEED)


@pytest.fixture
def public_key(private_key) -> bytes:
    return private_key.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)


@pytest.fixture
def sign_headers(private_key):
    """Build the two signature headers the platform would send for `body`."""

    def _sign(body: bytes, timestamp: str = TEST_TIMESTAMP) -> dict[str, str]:
        signature = private_key.sign(timestamp.encode() + body)
        return {
            "X-Signature-Ed25519": signature.hex(),
            "X-Signature-Timestamp": timestamp,
        }

    return _sign


@pytest.fixture
def make_body():
    """Serialize an interaction payload the way the platform does."""

    def _body(
        name: str = "ping",
        interaction_type: int = 2,
        options: list | None = None,
        token: str = "interaction-token",
        **extra,
    ) -> bytes:
        payload = {
            "id": "111",
            "application_id": "app-123",
            "type": interaction_type,
            "token": token,
            "version": 1,
            "guild_id": "222",
            "member": {"user": {"id": "333", "username": "tester"}, "roles": []},
        }
        if interaction_type != 1:
            payload["data"] = {"id": "444", "name": name, "type": 1, "options": options or []}
        payload.update(extra)
        return json.dumps(payload).encode()

    return _body


@pytest.fixture
def interactions_config(public_key) -> InteractionsConfig:
    return InteractionsConfig(
        application_id="app-123",
        public_key=public_key.hex(),
        bot_token="bot-token",
        client_id="app-123",
        api_base_url="https://discord.test/api/v10",
    )
