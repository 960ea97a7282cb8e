"""Custom column types for the store contract."""

from typing import Any
from uuid import UUID

from sqlalchemy import Integer, Text
from sqlalchemy.engine import Dialect
from sqlalchemy.types import TypeDecorator

from grokloc.core.models import Status
from grokloc.core.safe import SafeValue


class SafeString(TypeDecorator[SafeValue]):
    """Text column holding a ``SafeValue``.

    Only ``SafeValue`` instances may be bound; values read back are
    wrapped as trusted since they passed the gate on the way in.
    """

    impl = Text
    cache_ok = True

    def process_bind_param(self, value: Any, dialect: Dialect) -> str | None:
        if value is None:
            return None
        if not isinstance(value, SafeValue):
            raise TypeError(f"SafeString column requires SafeValue, got {type(value).__name__}")
        return str(value)

    def process_result_value(self, value: Any, dialect: Dialect) -> SafeValue | None:
        if value is None:
            return None
        return SafeValue.trusted(value)


class StatusType(TypeDecorator[Status]):
    """Integer column holding a ``Status``; unknown codes fail to decode."""

    impl = Integer
    cache_ok = True

    def process_bind_param(self, value: Any, dialect: Dialect) -> int | None:
        if value is None:
            return None
        if isinstance(value, Status):
            return value.to_int()
        return Status.from_int(value).to_int()

    def process_result_value(self, value: Any, dialect: Dialect) -> Status | None:
        if value is None:
            return None
        return Status.from_int(value)


class UUIDString(TypeDecorator[UUID]):
    """Text column holding a UUID in its canonical dashed form."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value: Any, dialect: Dialect) -> str | None:
        if value is None:
            return None
        return str(value if isinstance(value, UUID) else UUID(str(value)))

    def process_result_value(self, value: Any, dialect: Dialect) -> UUID | None:
        if value is None:
            return None
        return UUID(value)
