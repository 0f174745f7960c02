"""
Command Registration

Publishes each command's public shape to the platform.
Admin/startup path only, never called while handling interactions.
"""

import logging

from .commands import ApplicationCommand, CommandRegistry
from .rest import RestClient, RestClientError

logger = logging.getLogger(__name__)


class CommandRegistrationError(Exception):
    """Platform rejected a command registration."""

    def __init__(self, name: str, message: str):
        self.name = name
        super().__init__(f"Failed to register [{name}]: {message}")


class CommandRegistrar:
    """Registers global commands under `applications/{client_id}/commands`."""

    def __init__(self, rest: RestClient, client_id: str):
        self.rest = rest
        self.client_id = client_id

    async def register_global_command(self, command: ApplicationCommand) -> dict:
        """
        Register (or overwrite) one global command.

        Returns:
            The platform's command object

        Raises:
            CommandRegistrationError: If the call fails
        """
        path = f"applications/{self.client_id}/commands"

        try:
            response = await self.rest.post_json(path, command.to_registration_payload())
        except RestClientError as e:
            raise CommandRegistrationError(command.name, str(e)) from e

        logger.info(f"Registered command [{command.name}]", extra={"command_name": command.name})
        try:
            return response.json()
        except ValueError:
            return {}

    async def register_global_commands(self, registry: CommandRegistry) -> list[dict]:
        """Register every command in registry order; stops at the first failure."""
        registered = []
        for command in registry.commands:
            registered.append(await self.register_global_command(command))
        return registered
