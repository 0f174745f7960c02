"""
Platform REST Client

Outbound JSON POSTs authorized as the bot.
No retries. No rate-limit handling.
"""

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class RestClientError(Exception):
    """Outbound platform API call failed."""

    def __init__(self, message: str, status_code: int = 0):
        self.status_code = status_code
        super().__init__(message)


class RestClient:
    """Thin wrapper around httpx for the platform API."""

    def __init__(self, api_base_url: str, bot_token: str, timeout: float = 30.0):
        self.api_base_url = api_base_url.rstrip("/")
        self.bot_token = bot_token
        self.timeout = timeout

    def url(self, path: str) -> str:
        return f"{self.api_base_url}/{path.lstrip('/')}"

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bot {self.bot_token}",
            "Content-Type": "application/json",
        }

    async def post_json(self, path: str, payload: Any) -> httpx.Response:
        """
        POST `payload` as JSON to `path`.

        Raises:
            RestClientError: Transport failure or non-2xx status
        """
        endpoint = self.url(path)

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(endpoint, json=payload, headers=self.headers)
        except httpx.RequestError as e:
            raise RestClientError(f"HTTP request failed: {e}") from e

        if not 200 <= response.status_code < 300:
            error_text = response.text
            logger.error(
                f"Platform API error: {response.status_code} - {error_text}",
                extra={
                    "status_code": response.status_code,
                    "error_body": error_text,
                },
            )
            raise RestClientError(
                f"Platform API returned {response.status_code}",
                status_code=response.status_code,
            )

        return response
