"""
Interactions configuration.

Built once at startup and passed by reference to every component.
Nothing reads the environment at request time.
"""

import binascii
import logging
import os
from dataclasses import dataclass

from interactions.coordinator import DEFAULT_ERROR_MESSAGE
from interactions.ed25519 import PUBLIC_KEY_SIZE

logger = logging.getLogger(__name__)

DEFAULT_API_BASE_URL = "https://discord.com/api/v10"


class ConfigurationError(ValueError):
    """Configuration value is present but unusable."""
    pass


@dataclass(frozen=True)
class InteractionsConfig:
    """Application identity, keys and outbound settings."""

    application_id: str
    public_key: str          # hex, 64 chars
    bot_token: str
    client_id: str
    api_base_url: str = DEFAULT_API_BASE_URL
    target_timezone: str = "UTC"
    followup_timeout: float = 30.0
    max_background_tasks: int = 0   # 0 = unbounded
    error_message: str = DEFAULT_ERROR_MESSAGE

    REQUIRED = ("application_id", "public_key", "bot_token")

    @classmethod
    def from_env(cls) -> "InteractionsConfig":
        """Load configuration from environment variables."""
        application_id = os.getenv("DISCORD_APPLICATION_ID", "")
        return cls(
            application_id=application_id,
            public_key=os.getenv("DISCORD_PUBLIC_KEY", ""),
            bot_token=os.getenv("DISCORD_BOT_TOKEN", ""),
            client_id=os.getenv("DISCORD_CLIENT_ID") or application_id,
            api_base_url=os.getenv("DISCORD_API_BASE_URL", DEFAULT_API_BASE_URL),
            target_timezone=os.getenv("DISCORD_TARGET_TIMEZONE", "UTC"),
            followup_timeout=float(os.getenv("DISCORD_FOLLOWUP_TIMEOUT", "30")),
            max_background_tasks=int(os.getenv("DISCORD_MAX_BACKGROUND_TASKS", "0")),
            error_message=os.getenv("DISCORD_ERROR_MESSAGE", DEFAULT_ERROR_MESSAGE),
        )

    def missing(self) -> list[str]:
        """Names of required fields that are unset."""
        return [key for key in self.REQUIRED if not getattr(self, key)]

    def validate(self) -> bool:
        """Validate that required configuration is set."""
        missing = self.missing()
        if missing:
            logger.warning(f"Missing required configuration: {', '.join(missing)}")
            return False
        return True

    def public_key_bytes(self) -> bytes:
        """
        Decode the hex public key.

        Raises:
            ConfigurationError: Not 64 hex characters
        """
        try:
            key = binascii.unhexlify(self.public_key)
        except ValueError as e:
            raise ConfigurationError(f"DISCORD_PUBLIC_KEY is not valid hex: {e}") from e

        if len(key) != PUBLIC_KEY_SIZE:
            raise ConfigurationError(
                f"DISCORD_PUBLIC_KEY must be {PUBLIC_KEY_SIZE} bytes, got {len(key)}"
            )
        return key


def get_config() -> InteractionsConfig:
    """Get interactions configuration from the environment."""
    return InteractionsConfig.from_env()
