"""Error taxonomy and store error classification."""

from grokloc.core.errors.classify import (
    StoreErrorKind,
    classify_store_error,
    is_duplicate,
    is_not_found,
    translate_store_error,
)
from grokloc.core.errors.exceptions import (
    AppException,
    CipherError,
    CryptoError,
    DataIntegrityError,
    DuplicateError,
    IVLengthError,
    KeyLengthError,
    NotFoundError,
    PasswordNotDerivedError,
    StoreError,
    UnknownStatusError,
    UnsafeStringError,
    ValidationError,
)


__all__ = [
    # Exceptions
    "AppException",
    "CipherError",
    "CryptoError",
    "DataIntegrityError",
    "DuplicateError",
    "IVLengthError",
    "KeyLengthError",
    "NotFoundError",
    "PasswordNotDerivedError",
    "StoreError",
    # Classification
    "StoreErrorKind",
    "UnknownStatusError",
    "UnsafeStringError",
    "ValidationError",
    "classify_store_error",
    "is_duplicate",
    "is_not_found",
    "translate_store_error",
]
