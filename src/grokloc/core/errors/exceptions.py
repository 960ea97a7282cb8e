"""Domain exceptions for the package.

Errors fall into three families: validation failures, crypto failures and
store failures. Each carries a machine-readable ``error_code`` so callers
can branch on the kind of failure without parsing messages.
"""

from typing import Any


class AppException(Exception):
    """Base exception for all package errors.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code for callers
        details: Additional error details
    """

    message: str = "An unexpected error occurred"
    error_code: str = "internal_error"

    def __init__(
        self,
        message: str | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.message
        self.error_code = error_code or self.error_code
        self.details = details or {}
        super().__init__(self.message)


# ============================================================
# Validation
# ============================================================


class ValidationError(AppException):
    """Raised when input fails validation."""

    message = "Validation error"
    error_code = "validation_error"


class UnsafeStringError(ValidationError):
    """Raised when a string is rejected by the safe value gate."""

    message = "Input string unsafe"
    error_code = "unsafe_string"


class UnknownStatusError(ValidationError):
    """Raised when a stored status code has no ``Status`` member.

    Example:
        raise UnknownStatusError(details={"code": 9})
    """

    message = "Unknown status"
    error_code = "unknown_status"


class PasswordNotDerivedError(ValidationError):
    """Raised when a password is not the output of the password KDF."""

    message = "Password must be key-derived before storage"
    error_code = "password_not_derived"


# ============================================================
# Crypto
# ============================================================


class CryptoError(AppException):
    """Base class for encryption and digest failures."""

    message = "Crypto error"
    error_code = "crypto_error"


class KeyLengthError(CryptoError):
    """Raised for a key that is not a hex string of the required length."""

    message = "Bad key length"
    error_code = "key_length"


class IVLengthError(CryptoError):
    """Raised for an iv that is not a hex string of the required length."""

    message = "Bad iv length"
    error_code = "iv_length"


class CipherError(CryptoError):
    """Raised when the cipher operation itself fails.

    Corrupt ciphertext, bad padding and a wrong key usually land here.
    """

    message = "Cipher error"
    error_code = "cipher_error"


# ============================================================
# Store
# ============================================================


class StoreError(AppException):
    """Raised for store failures without a more specific kind."""

    message = "Store error"
    error_code = "store_error"


class NotFoundError(StoreError):
    """Raised when a point lookup or update matches no row.

    Example:
        raise NotFoundError("Org not found", resource="org", resource_id=str(org_id))
    """

    message = "Resource not found"
    error_code = "not_found"

    def __init__(
        self,
        message: str | None = None,
        resource: str | None = None,
        resource_id: str | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {})
        if resource:
            details["resource"] = resource
        if resource_id:
            details["resource_id"] = resource_id
        super().__init__(message=message, details=details, **kwargs)


class DuplicateError(StoreError):
    """Raised when an insert collides with a unique index or constraint."""

    message = "Duplicate resource"
    error_code = "duplicate"


class DataIntegrityError(StoreError):
    """Raised when decrypted values do not match their stored digests."""

    message = "Stored data failed integrity check"
    error_code = "data_integrity"
