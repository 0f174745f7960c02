#!/usr/bin/env python3
"""
Register the bot's commands with the platform.

Admin utility, run once after deploy or whenever the command set changes.
Registers every command from bot.commands, stopping at the first failure.

Usage:
    python scripts/register_commands.py
    python scripts/register_commands.py --only ping --dry-run
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import config  # noqa: F401  (loads .env)
from bot.commands import build_registry
from infra.config import get_config
from interactions.commands import CommandRegistry
from interactions.registration import CommandRegistrar, CommandRegistrationError
from interactions.rest import RestClient


async def register(only: list[str], dry_run: bool) -> int:
    """
    Register commands and print the outcome.

    Returns:
        Process exit code
    """
    settings = get_config()
    registry = build_registry(settings)
    if only:
        unknown = [name for name in only if name not in registry]
        if unknown:
            print(f"✗ Unknown command(s): {', '.join(unknown)}")
            return 2
        registry = CommandRegistry(registry[name] for name in only)

    if dry_run:
        for command in registry.commands:
            print(json.dumps(command.to_registration_payload(), indent=2))
        return 0

    if not settings.bot_token or not settings.client_id:
        print("✗ DISCORD_BOT_TOKEN and DISCORD_CLIENT_ID (or DISCORD_APPLICATION_ID) must be set")
        return 1

    rest = RestClient(settings.api_base_url, settings.bot_token)
    registrar = CommandRegistrar(rest, settings.client_id)
    try:
        await registrar.register_global_commands(registry)
    except CommandRegistrationError as e:
        print(f"✗ {e}")
        return 1

    print(f"✓ Registered {len(registry)} command(s): {', '.join(registry)}")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Register global commands")
    parser.add_argument("--only", nargs="*", default=[], help="Register only these command names")
    parser.add_argument("--dry-run", action="store_true", help="Print payloads without sending")
    args = parser.parse_args()
    return asyncio.run(register(args.only, args.dry_run))


if __name__ == "__main__":
    sys.exit(main())
