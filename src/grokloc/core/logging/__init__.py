"""Structured logging setup."""

from grokloc.core.logging.config import configure_logging


__all__ = [
    "configure_logging",
]
