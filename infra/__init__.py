"""
Infrastructure module exports.

Configuration and bootstrap for the interactions pipeline.
"""

from .config import ConfigurationError, InteractionsConfig, get_config
from .bootstrap import InfraBootstrap, bootstrap_interactions

__all__ = [
    "InteractionsConfig",
    "ConfigurationError",
    "get_config",
    "InfraBootstrap",
    "bootstrap_interactions",
]
