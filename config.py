"""
Configuration management for the interactions service.

Loads environment variables from .env file and provides typed access to server settings.
Platform credentials live in infra.config.InteractionsConfig.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
env_path = Path(__file__).parent / ".env"
load_dotenv(env_path)


class Config:
    """Server configuration."""

    # HTTP server
    PORT = int(os.getenv("PORT", "8000"))

    # Environment
    ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Default protocol for POST /interactions: "immediate" or "deferred"
    RESPONSE_MODE = os.getenv("RESPONSE_MODE", "deferred")


if __name__ == "__main__":
    from infra.config import get_config

    interactions = get_config()
    print("Configuration loaded:")
    print(f"  Application ID: {interactions.application_id or '✗ Missing'}")
    print(f"  Public Key: {'✓ Set' if interactions.public_key else '✗ Missing'}")
    print(f"  Bot Token: {'✓ Set' if interactions.bot_token else '✗ Missing'}")
    print(f"  Port: {Config.PORT}")
    print(f"  Response Mode: {Config.RESPONSE_MODE}")
    print(f"  Environment: {Config.ENVIRONMENT}")
    print(f"\n  Validation: {'✓ PASSED' if interactions.validate() else '✗ FAILED'}")
