"""Application configuration helpers."""

from __future__ import annotations

from .consolidation import ConsolidationConfig, get_consolidation_config
from .env import optional_env_bool, optional_env_float, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .logging import configure_logging
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "ConfigurationError",
    "ConsolidationConfig",
    "DatabaseConfig",
    "MissingConfigurationError",
    "StorageConfig",
    "configure_logging",
    "get_consolidation_config",
    "get_database_config",
    "get_storage_config",
    "optional_env_bool",
    "optional_env_float",
    "require_env_vars",
]
