"""Application configuration helpers."""

from __future__ import annotations

from .deploy import DeployConfig, get_deploy_config
from .env import optional_env_var
from .errors import ConfigurationError
from .logging import configure_logging
from .storage import (
    DatabaseConfig,
    StorageConfig,
    get_database_config,
    get_database_uri,
    get_storage_config,
)

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "DeployConfig",
    "StorageConfig",
    "configure_logging",
    "get_database_config",
    "get_database_uri",
    "get_deploy_config",
    "get_storage_config",
    "optional_env_var",
]
