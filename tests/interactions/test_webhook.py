"""
Interactions Webhook Tests

HTTP mapping of coordinator replies:
  - 200 + JSON for handshakes and commands
  - 401 for authentication failures
  - 400 for malformed bodies
"""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from interactions.commands import ApplicationCommand, CommandRegistry
from interactions.coordinator import DEFAULT_ERROR_MESSAGE, ResponseCoordinator
from interactions.dispatcher import InteractionDispatcher
from interactions.sender import FollowupSender
from interactions.webhook import get_coordinator, router


async def pong(interaction):
    return "pong!"


@pytest.fixture
def coordinator(public_key):
    return ResponseCoordinator(
        public_key=public_key,
        dispatcher=InteractionDispatcher(
            CommandRegistry([ApplicationCommand(name="ping", description="Ping", handler=pong)])
        ),
        followup_sender=AsyncMock(spec=FollowupSender),
    )


@pytest.fixture
def client(coordinator):
    app = FastAPI()
    app.include_router(router)
    app.dependency_overrides[get_coordinator] = lambda: coordinator
    return TestClient(app)


def post(client, path, body, headers):
    return client.post(path, content=body, headers={**headers, "Content-Type": "application/json"})


class TestHandshakeEndpoint:
    @pytest.mark.parametrize("path", ["/interactions", "/interactions/immediate", "/interactions/deferred"])
    def test_ping_pong(self, client, make_body, sign_headers, path):
        body = make_body(interaction_type=1)

        response = post(client, path, body, sign_headers(body))

        assert response.status_code == 200
        assert response.json() == {"type": 1}


class TestImmediateEndpoint:
    def test_command_reply(self, client, make_body, sign_headers):
        body = make_body(name="ping")

        response = post(client, "/interactions/immediate", body, sign_headers(body))

        assert response.status_code == 200
        assert response.json() == {"type": 4, "data": {"content": "pong!"}}

    def test_unknown_command_still_200(self, client, make_body, sign_headers):
        body = make_body(name="nope")

        response = post(client, "/interactions/immediate", body, sign_headers(body))

        assert response.status_code == 200
        assert response.json()["data"]["content"] == DEFAULT_ERROR_MESSAGE


class TestDeferredEndpoint:
    def test_ack_only(self, client, make_body, sign_headers):
        body = make_body(name="ping")

        response = post(client, "/interactions/deferred", body, sign_headers(body))

        assert response.status_code == 200
        assert response.json() == {"type": 5}

    def test_default_mode_from_config(self, client, make_body, sign_headers):
        body = make_body(name="ping")

        with patch("interactions.webhook.Config.RESPONSE_MODE", "immediate"):
            response = post(client, "/interactions", body, sign_headers(body))

        assert response.json()["data"]["content"] == "pong!"


class TestRejections:
    def test_missing_signature_401(self, client, make_body):
        response = post(client, "/interactions/immediate", make_body(), {})

        assert response.status_code == 401

    def test_invalid_signature_401(self, client, make_body, sign_headers):
        headers = sign_headers(make_body(name="ping"))

        response = post(client, "/interactions/immediate", make_body(name="other"), headers)

        assert response.status_code == 401

    def test_malformed_signature_401(self, client, make_body):
        headers = {"X-Signature-Ed25519": "not-hex", "X-Signature-Timestamp": "1700000000"}

        response = post(client, "/interactions/deferred", make_body(), headers)

        assert response.status_code == 401

    def test_signed_invalid_body_400(self, client, sign_headers):
        body = b'{"hello": "world"}'

        response = post(client, "/interactions/immediate", body, sign_headers(body))

        assert response.status_code == 400
