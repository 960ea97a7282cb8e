"""Core services and cross-cutting concerns."""

from grokloc.core.errors import (
    AppException,
    CryptoError,
    DuplicateError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from grokloc.core.models import Meta, Status
from grokloc.core.safe import SafeValue


__all__ = [
    # Errors
    "AppException",
    "CryptoError",
    "DuplicateError",
    # Models
    "Meta",
    "NotFoundError",
    "SafeValue",
    "Status",
    "StoreError",
    "ValidationError",
]
