"""Application configuration loader.

Loads centralized configuration from data/config/app_config_v1.yaml,
falling back to built-in defaults. A few settings can be overridden
from the environment so deployments don't need a config file.

Usage:
    from socialhub.config.app_config import load_app_config

    config = load_app_config()
    db_path = config.database.path
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
import yaml

logger = structlog.get_logger(__name__)

# Config file path (relative to project root)
CONFIG_FILE = Path("data/config/app_config_v1.yaml")

# Environment overrides: variable -> (section, key)
ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "SOCIALHUB_DB_PATH": ("database", "path"),
    "SOCIALHUB_STORAGE_DIR": ("storage", "root"),
    "SOCIALHUB_PUBLIC_URL": ("storage", "public_url"),
    "SOCIALHUB_LOG_LEVEL": ("logging", "level"),
}


@dataclass
class DatabaseConfig:
    """Where the record store lives."""

    path: str = "db/socialhub.db"


@dataclass
class StorageConfig:
    """File buckets on local disk, served under public_url."""

    root: str = "data/storage"
    public_url: str = "http://localhost:8000"
    buckets: list[str] = field(
        default_factory=lambda: ["avatars", "drawings", "videos", "books", "chat"]
    )


@dataclass
class FeedConfig:
    """Page sizes for list endpoints."""

    page_size: int = 20
    api_default_limit: int = 10
    api_max_limit: int = 100


@dataclass
class ServerConfig:
    """HTTP server settings."""

    host: str = "127.0.0.1"
    port: int = 8000
    cors_origins: list[str] = field(default_factory=lambda: ["*"])


@dataclass
class LoggingConfig:
    """structlog output settings."""

    level: str = "INFO"
    json: bool = False


@dataclass
class AppConfig:
    """Application-wide configuration."""

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    feed: FeedConfig = field(default_factory=FeedConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


# Module-level cache
_cached_config: AppConfig | None = None


def _get_defaults() -> dict[str, Any]:
    """Get default configuration values."""
    return {
        "database": {"path": "db/socialhub.db"},
        "storage": {
            "root": "data/storage",
            "public_url": "http://localhost:8000",
            "buckets": ["avatars", "drawings", "videos", "books", "chat"],
        },
        "feed": {"page_size": 20, "api_default_limit": 10, "api_max_limit": 100},
        "server": {"host": "127.0.0.1", "port": 8000, "cors_origins": ["*"]},
        "logging": {"level": "INFO", "json": False},
    }


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge override sections into base, one level deep."""
    result = {section: dict(values) for section, values in base.items()}
    for section, values in (override or {}).items():
        if isinstance(values, dict):
            result.setdefault(section, {}).update(values)
    return result


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Apply SOCIALHUB_* environment variables on top of file values."""
    for env_var, (section, key) in ENV_OVERRIDES.items():
        value = os.environ.get(env_var)
        if value:
            data.setdefault(section, {})[key] = value
            logger.debug("config_env_override", variable=env_var)
    return data


def _parse_config(data: dict[str, Any]) -> AppConfig:
    """Parse configuration dictionary into AppConfig object."""
    db = data.get("database", {})
    storage = data.get("storage", {})
    feed = data.get("feed", {})
    server = data.get("server", {})
    log = data.get("logging", {})

    return AppConfig(
        database=DatabaseConfig(path=str(db.get("path", "db/socialhub.db"))),
        storage=StorageConfig(
            root=str(storage.get("root", "data/storage")),
            public_url=str(storage.get("public_url", "http://localhost:8000")).rstrip("/"),
            buckets=list(storage.get("buckets", StorageConfig().buckets)),
        ),
        feed=FeedConfig(
            page_size=int(feed.get("page_size", 20)),
            api_default_limit=int(feed.get("api_default_limit", 10)),
            api_max_limit=int(feed.get("api_max_limit", 100)),
        ),
        server=ServerConfig(
            host=server.get("host", "127.0.0.1"),
            port=int(server.get("port", 8000)),
            cors_origins=list(server.get("cors_origins", ["*"])),
        ),
        logging=LoggingConfig(
            level=str(log.get("level", "INFO")).upper(),
            json=bool(log.get("json", False)),
        ),
    )


def load_app_config(force_reload: bool = False) -> AppConfig:
    """Load application config.

    Args:
        force_reload: If True, ignore cached config and reload from file.

    Returns:
        AppConfig object with all settings.
    """
    global _cached_config

    if _cached_config is not None and not force_reload:
        return _cached_config

    data = _get_defaults()

    if CONFIG_FILE.exists():
        logger.debug("loading_app_config", source=str(CONFIG_FILE))
        file_data = yaml.safe_load(CONFIG_FILE.read_text(encoding="utf-8")) or {}
        data = _merge(data, file_data)
    else:
        logger.info("using_default_config")

    _cached_config = _parse_config(_apply_env_overrides(data))
    return _cached_config


def clear_config_cache() -> None:
    """Clear the configuration cache.

    Useful for testing or when config is modified at runtime.
    """
    global _cached_config
    _cached_config = None
