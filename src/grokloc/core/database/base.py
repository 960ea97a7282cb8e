"""SQLAlchemy declarative base and common mixins."""

from uuid import UUID, uuid4

from sqlalchemy import FetchedValue, Integer
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from grokloc.core.database.types import StatusType, UUIDString
from grokloc.core.models import Meta, Status


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class UUIDMixin:
    """Mixin that adds a UUID primary key stored as text."""

    id: Mapped[UUID] = mapped_column(
        UUIDString,
        primary_key=True,
        default=uuid4,
    )


class MetaMixin:
    """Mixin that adds the metadata columns shared by every table.

    ``ctime`` and ``mtime`` are unix seconds written by store triggers,
    never by the client. ``schema_version`` is fixed at construction.
    """

    schema_version: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )
    status: Mapped[Status] = mapped_column(
        StatusType,
        default=Status.UNCONFIRMED,
        nullable=False,
    )
    ctime: Mapped[int | None] = mapped_column(
        Integer,
        server_default=FetchedValue(),
        nullable=True,
    )
    mtime: Mapped[int | None] = mapped_column(
        Integer,
        server_default=FetchedValue(),
        server_onupdate=FetchedValue(),
        nullable=True,
    )

    @property
    def meta(self) -> Meta:
        """Metadata as a value, with store timestamps as UTC datetimes."""
        return Meta.from_row_vals(
            self.ctime,
            self.mtime,
            self.schema_version,
            self.status,
        )
