"""
Bot module - the application's command set.

Includes:
- commands.py: ping, echo and time handlers plus the registry builder
"""

from bot.commands import build_registry

__all__ = ["build_registry"]
