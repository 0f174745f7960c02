"""
Interactions bootstrap.

Singleton pattern for wiring config, command registry and coordinator.
"""

from typing import Optional

from interactions.commands import CommandRegistry
from interactions.coordinator import ResponseCoordinator
from interactions.dispatcher import InteractionDispatcher
from interactions.registration import CommandRegistrar
from interactions.rest import RestClient
from interactions.sender import FollowupSender

from .config import InteractionsConfig, get_config


class InfraBootstrap:
    """
    Build every component from one configuration value.

    Singleton pattern - single instance per process.
    """

    _instance: Optional["InfraBootstrap"] = None

    def __init__(
        self,
        config: Optional[InteractionsConfig] = None,
        registry: Optional[CommandRegistry] = None,
    ):
        """Initialize components with configuration."""
        self.config = config or get_config()
        if registry is None:
            from bot.commands import build_registry
            registry = build_registry(self.config)
        self.registry = registry

        self.rest = RestClient(
            api_base_url=self.config.api_base_url,
            bot_token=self.config.bot_token,
            timeout=self.config.followup_timeout,
        )
        self.dispatcher = InteractionDispatcher(self.registry)
        self.followup_sender = FollowupSender(self.rest, self.config.application_id)
        self.registrar = CommandRegistrar(self.rest, self.config.client_id)
        self.coordinator = ResponseCoordinator(
            public_key=self.config.public_key_bytes(),
            dispatcher=self.dispatcher,
            followup_sender=self.followup_sender,
            error_message=self.config.error_message,
            max_background_tasks=self.config.max_background_tasks,
        )

    @classmethod
    def get_instance(
        cls,
        config: Optional[InteractionsConfig] = None,
        registry: Optional[CommandRegistry] = None,
    ) -> "InfraBootstrap":
        """
        Get singleton instance.

        Args:
            config: Optional custom configuration (only used first time)
            registry: Optional command registry (only used first time)

        Returns:
            Singleton InfraBootstrap instance
        """
        if cls._instance is None:
            cls._instance = cls(config, registry)
        return cls._instance

    @classmethod
    def current(cls) -> Optional["InfraBootstrap"]:
        """Instance built at startup, or None before bootstrap. Never builds one."""
        return cls._instance

    @classmethod
    def reset(cls):
        """Reset singleton (for testing)."""
        cls._instance = None

    def __repr__(self) -> str:
        return (
            f"InfraBootstrap(application_id={self.config.application_id}, "
            f"commands={list(self.registry)}, "
            f"max_background_tasks={self.config.max_background_tasks or 'unbounded'})"
        )


def bootstrap_interactions(
    config: Optional[InteractionsConfig] = None,
    registry: Optional[CommandRegistry] = None,
) -> InfraBootstrap:
    """
    Bootstrap the interactions pipeline.

    Args:
        config: Optional custom configuration
        registry: Optional command registry; defaults to bot.commands

    Returns:
        InfraBootstrap instance with all components initialized
    """
    return InfraBootstrap.get_instance(config, registry)
