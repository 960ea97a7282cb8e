"""structlog configuration.

Call ``configure_logging`` once at process start. Modules obtain their
logger with ``structlog.get_logger()`` and log snake_case event names.
Keys, ivs, plaintext PII and password hashes are never logged.
"""

import logging

import structlog

from grokloc.config import Settings, get_settings


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog processors and level from settings."""
    settings = settings or get_settings()
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            (
                structlog.processors.JSONRenderer()
                if settings.log_json
                else structlog.dev.ConsoleRenderer()
            ),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
