"""
Command Descriptors and Registry

The embedding application builds one CommandRegistry at startup.
It is read-only afterwards and shared by every in-flight request without locking.
"""

from types import MappingProxyType
from typing import Any, Awaitable, Callable, Iterable, Iterator, Mapping, Optional

from pydantic import BaseModel, Field

from .schemas import ApplicationCommandOptionType, ApplicationCommandType, Interaction

Handler = Callable[[Interaction], Awaitable[str]]


class ApplicationCommandOptionChoice(BaseModel):
    name: str
    value: Any


class ApplicationCommandOption(BaseModel):
    """Option schema published at registration. Opaque to dispatch."""
    type: ApplicationCommandOptionType
    name: str
    description: str
    required: Optional[bool] = None
    choices: Optional[list[ApplicationCommandOptionChoice]] = None
    options: Optional[list["ApplicationCommandOption"]] = None


class ApplicationCommand(BaseModel):
    """
    A command the application answers.

    `name` is the dispatch key. `handler` never goes on the wire.

    ref: https://discord.com/developers/docs/interactions/application-commands
    """

    name: str
    description: str = ""
    type: ApplicationCommandType = ApplicationCommandType.CHAT_INPUT
    options: Optional[list[ApplicationCommandOption]] = None
    default_member_permissions: Optional[str] = None
    dm_permission: Optional[bool] = None
    nsfw: Optional[bool] = None
    handler: Optional[Handler] = Field(default=None, exclude=True)

    class Config:
        frozen = True
        arbitrary_types_allowed = True

    def to_registration_payload(self) -> dict[str, Any]:
        """Public shape sent to the command-registration endpoint."""
        return self.model_dump(mode="json", exclude_none=True)


class CommandRegistry(Mapping[str, ApplicationCommand]):
    """
    Immutable name -> ApplicationCommand mapping.

    Lookup is exact and case-sensitive. Iteration follows registration order.
    """

    def __init__(self, commands: Iterable[ApplicationCommand] = ()):
        by_name: dict[str, ApplicationCommand] = {}
        for command in commands:
            if command.name in by_name:
                raise ValueError(f"Duplicate command name: {command.name!r}")
            by_name[command.name] = command
        self._commands = MappingProxyType(by_name)

    def __getitem__(self, name: str) -> ApplicationCommand:
        return self._commands[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._commands)

    def __len__(self) -> int:
        return len(self._commands)

    @property
    def commands(self) -> tuple[ApplicationCommand, ...]:
        return tuple(self._commands.values())

    def __repr__(self) -> str:
        return f"CommandRegistry({list(self._commands)})"
