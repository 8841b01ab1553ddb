"""Structured logging configuration with structlog."""

import logging

import structlog

from socialhub.config.app_config import LoggingConfig


def configure_logging(settings: LoggingConfig | None = None) -> None:
    """Configure structlog for JSON or console output."""
    settings = settings or LoggingConfig()
    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer() if settings.json else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
    )

    logging.basicConfig(level=getattr(logging, settings.level.upper(), logging.INFO))
