"""Cross-model definitions shared by every table model."""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, model_validator

from grokloc.core.errors import UnknownStatusError


class Status(Enum):
    """Model lifecycle status.

    New self-registering entities start ``UNCONFIRMED``. Any status may be
    set explicitly by an authorized caller; transitions are not checked.
    """

    UNCONFIRMED = 1
    ACTIVE = 2
    INACTIVE = 3

    def __str__(self) -> str:
        return self.name.capitalize()

    def to_int(self) -> int:
        """Translate a Status to its storage representation."""
        return self.value

    @classmethod
    def from_int(cls, i: int) -> "Status":
        """Translate a Status from its storage representation.

        Raises:
            UnknownStatusError: If i is not a known status code
        """
        try:
            return cls(i)
        except ValueError as e:
            raise UnknownStatusError(details={"code": i}) from e


_EPOCH = datetime.fromtimestamp(0, tz=UTC)


class Meta(BaseModel):
    """Metadata fields shared by all table models.

    ``ctime`` and ``mtime`` are assigned by the store; values built in
    process default to the epoch until the row is read back.
    """

    model_config = ConfigDict(frozen=True)

    ctime: datetime = _EPOCH
    mtime: datetime = _EPOCH
    schema_version: int = 0
    status: Status = Status.UNCONFIRMED

    @model_validator(mode="after")
    def check_times(self) -> "Meta":
        if self.ctime > self.mtime:
            raise ValueError("ctime must not be after mtime")
        return self

    @classmethod
    def from_row_vals(
        cls,
        ctime: int | None,
        mtime: int | None,
        schema_version: int,
        status: int | Status,
    ) -> "Meta":
        """Build Meta from stored unix-second timestamps and a status code."""
        return cls(
            ctime=datetime.fromtimestamp(ctime or 0, tz=UTC),
            mtime=datetime.fromtimestamp(mtime or 0, tz=UTC),
            schema_version=schema_version,
            status=status if isinstance(status, Status) else Status.from_int(status),
        )
