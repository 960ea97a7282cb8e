"""Unit tests for Status and Meta."""

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError as PydanticValidationError

from grokloc.core.errors import UnknownStatusError
from grokloc.core.models import Meta, Status


pytestmark = pytest.mark.unit


class TestStatus:
    """Tests for status codes."""

    @pytest.mark.parametrize(
        ("status", "code"),
        [(Status.UNCONFIRMED, 1), (Status.ACTIVE, 2), (Status.INACTIVE, 3)],
    )
    def test_codes(self, status: Status, code: int):
        assert status.to_int() == code
        assert Status.from_int(code) is status

    @pytest.mark.parametrize("code", [0, 4, -1])
    def test_unknown_code(self, code: int):
        with pytest.raises(UnknownStatusError) as exc_info:
            Status.from_int(code)

        assert exc_info.value.details == {"code": code}

    def test_display(self):
        assert str(Status.UNCONFIRMED) == "Unconfirmed"


class TestMeta:
    """Tests for Meta."""

    def test_defaults(self):
        meta = Meta()

        assert meta.status is Status.UNCONFIRMED
        assert meta.schema_version == 0
        assert meta.ctime == meta.mtime

    def test_from_row_vals(self):
        meta = Meta.from_row_vals(100, 200, 0, 2)

        assert meta.ctime == datetime.fromtimestamp(100, tz=UTC)
        assert meta.mtime == datetime.fromtimestamp(200, tz=UTC)
        assert meta.status is Status.ACTIVE

    def test_from_row_vals_unknown_status(self):
        with pytest.raises(UnknownStatusError):
            Meta.from_row_vals(100, 200, 0, 7)

    def test_ctime_after_mtime_rejected(self):
        with pytest.raises(PydanticValidationError):
            Meta.from_row_vals(200, 100, 0, 1)

    def test_frozen(self):
        meta = Meta()

        with pytest.raises(PydanticValidationError):
            meta.status = Status.ACTIVE  # type: ignore[misc]
