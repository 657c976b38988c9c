"""Application configuration helpers."""

from __future__ import annotations

from .contentful import ContentSourceConfig, get_content_source_config
from .env import optional_int_env, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .storage import DatabaseConfig, catalog_data_dir, get_database_config
from .sync import SyncConfig, get_sync_config

__all__ = [
    "ConfigurationError",
    "ContentSourceConfig",
    "DatabaseConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "SyncConfig",
    "catalog_data_dir",
    "configure_logging",
    "get_content_source_config",
    "get_database_config",
    "get_sync_config",
    "optional_int_env",
    "require_env_var",
    "require_env_vars",
]
