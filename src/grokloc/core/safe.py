"""Safe value filtering.

Free-text input must pass through this gate before it can be placed in a
model field. ``SafeValue`` is the proof that a string has been checked:
code that receives one never validates it again.

This is not a replacement for bound query parameters, which the
persistence layer always uses.
"""

import re
import secrets
from functools import total_ordering

from grokloc.core.constants import STR_MAX
from grokloc.core.errors import UnsafeStringError


_FORBIDDEN_CHARS = frozenset("\"'<>`")
_FORBIDDEN_ENTITIES = ("&lt;", "&gt;")
_FORBIDDEN_PATTERNS = (
    re.compile(r"insert\s+into"),
    re.compile(r"(?:drop|create)\s+(?:table|database)"),
    re.compile(r"(?:select|update)\s+"),
)


def validate(raw: str) -> bool:
    """Check that a string is relatively safe for db use and rendering.

    Args:
        raw: The candidate string

    Returns:
        True if the string may be stored, False otherwise
    """
    if not raw or len(raw) > STR_MAX:
        return False
    if any(c in _FORBIDDEN_CHARS for c in raw):
        return False
    lowered = raw.lower()
    if any(entity in lowered for entity in _FORBIDDEN_ENTITIES):
        return False
    return not any(pattern.search(lowered) for pattern in _FORBIDDEN_PATTERNS)


@total_ordering
class SafeValue:
    """A string that has passed ``validate``.

    Construct with ``SafeValue(raw)``; values read back from the store
    are wrapped with ``SafeValue.trusted(raw)``.
    """

    __slots__ = ("_value",)

    def __init__(self, raw: str) -> None:
        if not validate(raw):
            raise UnsafeStringError()
        self._value = raw

    @classmethod
    def trusted(cls, raw: str) -> "SafeValue":
        """Wrap a value already known to be safe (e.g. read from the store)."""
        instance = cls.__new__(cls)
        instance._value = raw
        return instance

    @classmethod
    def random(cls) -> "SafeValue":
        """Generate a random safe value."""
        return cls(secrets.token_hex(16))

    @property
    def value(self) -> str:
        return self._value

    def __str__(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return f"SafeValue({self._value!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SafeValue):
            return self._value == other._value
        return NotImplemented

    def __lt__(self, other: "SafeValue") -> bool:
        if isinstance(other, SafeValue):
            return self._value < other._value
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)
