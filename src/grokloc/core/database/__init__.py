"""Database layer - store contract, column types, mixins and sessions."""

from grokloc.core.database.base import Base, MetaMixin, UUIDMixin
from grokloc.core.database.schema import APP_CREATE_SCHEMA_SQLITE, create_schema
from grokloc.core.database.session import (
    SessionFactory,
    create_engine,
    create_session_factory,
    transaction,
)
from grokloc.core.database.types import SafeString, StatusType, UUIDString


__all__ = [
    "APP_CREATE_SCHEMA_SQLITE",
    "Base",
    "MetaMixin",
    "SafeString",
    "SessionFactory",
    "StatusType",
    "UUIDMixin",
    "UUIDString",
    "create_engine",
    "create_schema",
    "create_session_factory",
    "transaction",
]
