"""Interactions Core - Module Exports"""

from .classifier import InteractionKind, classify
from .commands import (
    ApplicationCommand,
    ApplicationCommandOption,
    ApplicationCommandOptionChoice,
    CommandRegistry,
    Handler,
)
from .coordinator import (
    CoordinatorState,
    DeserializationError,
    RawRequest,
    RejectionReason,
    Reply,
    ResponseCoordinator,
    ResponseMode,
    parse_interaction,
)
from .dispatcher import (
    DispatchError,
    DispatchErrorKind,
    HandlerError,
    InteractionDispatcher,
    UnconfiguredCommand,
    UnknownCommand,
)
from .ed25519 import InvalidInputSize, verify
from .registration import CommandRegistrar, CommandRegistrationError
from .rest import RestClient, RestClientError
from .schemas import (
    ApplicationCommandOptionType,
    ApplicationCommandType,
    Interaction,
    InteractionCallbackType,
    InteractionData,
    InteractionDataOption,
    InteractionResponse,
    InteractionType,
    OptionNotFound,
)
from .security import AuthenticationError, AuthFailure, AuthResult, authenticate
from .sender import FollowupDeliveryError, FollowupSender

__all__ = [
    # Verification
    "verify",
    "InvalidInputSize",
    "authenticate",
    "AuthResult",
    "AuthFailure",
    "AuthenticationError",
    # Schemas
    "Interaction",
    "InteractionData",
    "InteractionDataOption",
    "InteractionType",
    "InteractionCallbackType",
    "InteractionResponse",
    "ApplicationCommandType",
    "ApplicationCommandOptionType",
    "OptionNotFound",
    # Commands
    "ApplicationCommand",
    "ApplicationCommandOption",
    "ApplicationCommandOptionChoice",
    "CommandRegistry",
    "Handler",
    # Dispatch
    "classify",
    "InteractionKind",
    "InteractionDispatcher",
    "DispatchError",
    "DispatchErrorKind",
    "UnknownCommand",
    "UnconfiguredCommand",
    "HandlerError",
    # Coordination
    "ResponseCoordinator",
    "ResponseMode",
    "RawRequest",
    "Reply",
    "RejectionReason",
    "CoordinatorState",
    "DeserializationError",
    "parse_interaction",
    # Outbound
    "RestClient",
    "RestClientError",
    "FollowupSender",
    "FollowupDeliveryError",
    "CommandRegistrar",
    "CommandRegistrationError",
]
