"""
Interaction Dispatcher

Resolves a command invocation against the CommandRegistry and awaits its handler.
No retries. No timeout. Handler latency is the caller's concern.
"""

import logging
from enum import Enum
from typing import Optional

from .commands import CommandRegistry
from .schemas import Interaction

logger = logging.getLogger(__name__)


class DispatchErrorKind(str, Enum):
    UNKNOWN_COMMAND = "unknown_command"
    UNCONFIGURED_COMMAND = "unconfigured_command"


class DispatchError(Exception):
    """Interaction could not be routed to a handler."""

    kind: DispatchErrorKind

    def __init__(self, name: Optional[str], message: str):
        self.name = name
        super().__init__(message)


class UnknownCommand(DispatchError):
    """No registered command matches the interaction name."""

    kind = DispatchErrorKind.UNKNOWN_COMMAND

    def __init__(self, name: Optional[str]):
        super().__init__(name, f"Failed to find matching command for interaction named [{name}]")


class UnconfiguredCommand(DispatchError):
    """Command is registered but has no handler attached."""

    kind = DispatchErrorKind.UNCONFIGURED_COMMAND

    def __init__(self, name: str):
        super().__init__(name, f"No interaction handler defined for [{name}]")


class HandlerError(Exception):
    """User handler code raised."""

    def __init__(self, name: str, original: BaseException):
        self.name = name
        self.original = original
        super().__init__(f"Handler for [{name}] failed: {original!r}")


class InteractionDispatcher:
    """Routes interactions to registered handlers by exact name."""

    def __init__(self, registry: CommandRegistry):
        self.registry = registry

    async def dispatch(self, interaction: Interaction) -> str:
        """
        Run the handler registered under `interaction.data.name`.

        Returns:
            The handler's result, unchanged

        Raises:
            UnknownCommand: Name not in registry
            UnconfiguredCommand: Command has no handler
            HandlerError: The handler itself raised, or returned a non-string
        """
        name = interaction.command_name
        command = self.registry.get(name) if name is not None else None

        if command is None:
            raise UnknownCommand(name)
        if command.handler is None:
            raise UnconfiguredCommand(command.name)

        logger.debug(
            f"Dispatching [{name}]",
            extra={"interaction_id": interaction.id, "command_name": name},
        )

        try:
            result = await command.handler(interaction)
        except Exception as e:
            raise HandlerError(command.name, e) from e

        if not isinstance(result, str):
            error = TypeError(f"handler returned {type(result).__name__}, expected str")
            raise HandlerError(command.name, error) from error
        return result
