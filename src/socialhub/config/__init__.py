"""Configuration package for socialhub."""

from socialhub.config.app_config import (
    AppConfig,
    DatabaseConfig,
    FeedConfig,
    LoggingConfig,
    ServerConfig,
    StorageConfig,
    clear_config_cache,
    load_app_config,
)
from socialhub.config.logging import configure_logging

__all__ = [
    "AppConfig",
    "DatabaseConfig",
    "FeedConfig",
    "LoggingConfig",
    "ServerConfig",
    "StorageConfig",
    "clear_config_cache",
    "configure_logging",
    "load_app_config",
]
