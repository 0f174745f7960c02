"""
Interaction Payload - Pydantic Schemas

PURE DATA MODELS - NO DISPATCH LOGIC
Defines the inbound interaction contract and the reply shapes sent back.

ref: https://discord.com/developers/docs/interactions/receiving-and-responding
"""

from enum import IntEnum
from typing import Any, Optional

from pydantic import BaseModel, Field


# ============================================================================
# ENUMS
# ============================================================================

class InteractionType(IntEnum):
    PING = 1
    APPLICATION_COMMAND = 2
    MESSAGE_COMPONENT = 3
    APPLICATION_COMMAND_AUTOCOMPLETE = 4
    MODAL_SUBMIT = 5


class InteractionCallbackType(IntEnum):
    PONG = 1
    CHANNEL_MESSAGE_WITH_SOURCE = 4
    DEFERRED_CHANNEL_MESSAGE_WITH_SOURCE = 5
    DEFERRED_UPDATE_MESSAGE = 6
    UPDATE_MESSAGE = 7


class ApplicationCommandType(IntEnum):
    CHAT_INPUT = 1
    USER = 2
    MESSAGE = 3


class ApplicationCommandOptionType(IntEnum):
    SUB_COMMAND = 1
    SUB_COMMAND_GROUP = 2
    STRING = 3
    INTEGER = 4
    BOOLEAN = 5
    USER = 6
    CHANNEL = 7
    ROLE = 8
    MENTIONABLE = 9
    NUMBER = 10
    ATTACHMENT = 11


# ============================================================================
# INBOUND INTERACTION (INPUT)
# ============================================================================

class OptionNotFound(KeyError):
    """Interaction carries no option with the requested name."""
    pass


class User(BaseModel):
    """Platform user."""
    id: str
    username: Optional[str] = None
    global_name: Optional[str] = None
    discriminator: Optional[str] = None

    class Config:
        extra = "allow"


class GuildMember(BaseModel):
    """Guild member wrapper; `user` is set when the interaction came from a guild."""
    user: Optional[User] = None
    nick: Optional[str] = None
    roles: list[str] = Field(default_factory=list)

    class Config:
        extra = "allow"


class InteractionDataOption(BaseModel):
    """A name/value pair supplied by the invoking user."""
    name: str
    type: Optional[int] = None
    value: Any = None
    options: list["InteractionDataOption"] = Field(default_factory=list)
    focused: Optional[bool] = None


class InteractionData(BaseModel):
    """Command invocation data. `name` is the dispatch key."""
    id: Optional[str] = None
    name: Optional[str] = None
    type: Optional[int] = None
    options: list[InteractionDataOption] = Field(default_factory=list)

    class Config:
        extra = "allow"


class Interaction(BaseModel):
    """
    A single inbound platform event.

    Read-only once parsed; the dispatcher and handlers only inspect it.
    """

    id: str
    application_id: Optional[str] = None
    type: InteractionType
    data: Optional[InteractionData] = None
    guild_id: Optional[str] = None
    channel_id: Optional[str] = None
    member: Optional[GuildMember] = None
    user: Optional[User] = None
    token: str = ""
    version: Optional[int] = None
    message: Optional[dict[str, Any]] = None
    app_permissions: Optional[str] = None
    locale: Optional[str] = None
    guild_locale: Optional[str] = None

    class Config:
        extra = "allow"
        frozen = True

    @property
    def command_name(self) -> Optional[str]:
        return self.data.name if self.data else None

    @property
    def invoking_user(self) -> Optional[User]:
        """Guild invocations carry the user under `member`, DMs under `user`."""
        if self.member and self.member.user:
            return self.member.user
        return self.user

    def get_option_value(self, option_name: str) -> Any:
        """
        Value of the first option named `option_name`.

        Raises:
            OptionNotFound: No option with that name
        """
        options = self.data.options if self.data else []
        for option in options:
            if option.name == option_name:
                return option.value
        raise OptionNotFound(f"Cannot find [{option_name}]")


# ============================================================================
# INTERACTION RESPONSE (OUTPUT)
# ============================================================================

class InteractionCallbackData(BaseModel):
    content: str


class InteractionResponse(BaseModel):
    """Body returned to the platform in the same HTTP cycle."""
    type: InteractionCallbackType
    data: Optional[InteractionCallbackData] = None

    def to_body(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


def pong_response() -> InteractionResponse:
    return InteractionResponse(type=InteractionCallbackType.PONG)


def message_response(content: str) -> InteractionResponse:
    return InteractionResponse(
        type=InteractionCallbackType.CHANNEL_MESSAGE_WITH_SOURCE,
        data=InteractionCallbackData(content=content),
    )


def deferred_response() -> InteractionResponse:
    return InteractionResponse(type=InteractionCallbackType.DEFERRED_CHANNEL_MESSAGE_WITH_SOURCE)


class FollowupMessage(BaseModel):
    """Out-of-band follow-up body, addressed by interaction token."""
    content: str
