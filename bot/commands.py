"""
Application command set.

Handlers are plain async functions from Interaction to reply text.
The registry is built once at startup and handed to the bootstrap.
"""

from datetime import datetime
from zoneinfo import ZoneInfo

from infra.config import InteractionsConfig
from interactions.commands import (
    ApplicationCommand,
    ApplicationCommandOption,
    CommandRegistry,
)
from interactions.schemas import ApplicationCommandOptionType, Interaction


async def ping(interaction: Interaction) -> str:
    return "pong!"


async def echo(interaction: Interaction) -> str:
    return str(interaction.get_option_value("text"))


def make_time_handler(timezone: str):
    """Reply with the current time in the configured timezone."""
    tz = ZoneInfo(timezone)

    async def current_time(interaction: Interaction) -> str:
        now = datetime.now(tz)
        return f"It is {now:%H:%M} ({timezone})"

    return current_time


def build_registry(config: InteractionsConfig) -> CommandRegistry:
    return CommandRegistry([
        ApplicationCommand(
            name="ping",
            description="Check that the bot is alive",
            handler=ping,
        ),
        ApplicationCommand(
            name="echo",
            description="Repeat a message back",
            options=[
                ApplicationCommandOption(
                    type=ApplicationCommandOptionType.STRING,
                    name="text",
                    description="What to repeat",
                    required=True,
                ),
            ],
            handler=echo,
        ),
        ApplicationCommand(
            name="time",
            description="Current time",
            handler=make_time_handler(config.target_timezone),
        ),
    ])
