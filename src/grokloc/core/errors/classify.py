"""Store error classification.

Maps driver and SQLAlchemy exceptions to the domain store errors so
callers can tell duplicate from not-found from anything else.
"""

from enum import StrEnum

from sqlalchemy.exc import IntegrityError, NoResultFound, SQLAlchemyError

from grokloc.core.errors.exceptions import (
    DuplicateError,
    NotFoundError,
    StoreError,
)


# Structured unique-violation codes reported by the drivers
_SQLITE_UNIQUE_ERRORNAMES = frozenset(
    {"SQLITE_CONSTRAINT_UNIQUE", "SQLITE_CONSTRAINT_PRIMARYKEY"}
)
_PG_UNIQUE_SQLSTATE = "23505"


class StoreErrorKind(StrEnum):
    """Classification of a store failure."""

    DUPLICATE = "duplicate"
    NOT_FOUND = "not_found"
    OTHER = "other"


def _driver_error(exc: BaseException) -> BaseException | None:
    """Return the DBAPI exception wrapped by a SQLAlchemy error, if any."""
    orig = getattr(exc, "orig", None)
    # asyncpg errors arrive wrapped once more by the SQLAlchemy adapter
    return getattr(orig, "__cause__", None) or orig


def is_duplicate(exc: BaseException) -> bool:
    """Return True if exc reports a unique index or constraint violation."""
    if isinstance(exc, DuplicateError):
        return True
    if not isinstance(exc, IntegrityError):
        return False

    for driver_exc in (exc.orig, _driver_error(exc)):
        if driver_exc is None:
            continue
        if getattr(driver_exc, "sqlite_errorname", None) in _SQLITE_UNIQUE_ERRORNAMES:
            return True
        if getattr(driver_exc, "sqlstate", None) == _PG_UNIQUE_SQLSTATE:
            return True
        if getattr(driver_exc, "pgcode", None) == _PG_UNIQUE_SQLSTATE:
            return True

    # Fallback for drivers without structured codes
    return "unique constraint" in str(exc).lower()


def is_not_found(exc: BaseException) -> bool:
    """Return True if exc reports a point lookup that matched no row."""
    return isinstance(exc, NotFoundError | NoResultFound)


def classify_store_error(exc: BaseException) -> StoreErrorKind:
    """Classify a store exception.

    Args:
        exc: Exception raised by the store or by this package

    Returns:
        The kind of store failure
    """
    if is_duplicate(exc):
        return StoreErrorKind.DUPLICATE
    if is_not_found(exc):
        return StoreErrorKind.NOT_FOUND
    return StoreErrorKind.OTHER


def translate_store_error(
    exc: SQLAlchemyError,
    resource: str | None = None,
    resource_id: str | None = None,
) -> StoreError:
    """Build the domain store error matching a SQLAlchemy exception.

    The caller raises the result ``from exc`` to keep the cause chain.

    Args:
        exc: The SQLAlchemy exception
        resource: Resource type for error details
        resource_id: Resource id for error details

    Returns:
        DuplicateError, NotFoundError or StoreError
    """
    kind = classify_store_error(exc)
    if kind is StoreErrorKind.DUPLICATE:
        details = {"resource": resource} if resource else {}
        return DuplicateError(f"Duplicate {resource or 'resource'}", details=details)
    if kind is StoreErrorKind.NOT_FOUND:
        return NotFoundError(
            f"{(resource or 'resource').capitalize()} not found",
            resource=resource,
            resource_id=resource_id,
        )
    return StoreError(str(exc.__class__.__name__), details={"resource": resource})
