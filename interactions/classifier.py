"""Interaction classification: handshake probe vs. command invocation."""

from enum import Enum

from .schemas import Interaction, InteractionType


class InteractionKind(str, Enum):
    HANDSHAKE = "handshake"
    COMMAND = "command"


def classify(interaction: Interaction) -> InteractionKind:
    """PING is answered with PONG and never reaches the registry."""
    if interaction.type == InteractionType.PING:
        return InteractionKind.HANDSHAKE
    return InteractionKind.COMMAND
