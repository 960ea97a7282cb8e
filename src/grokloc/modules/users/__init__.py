"""Users module - identities with encrypted PII."""

from grokloc.modules.users.models import User


__all__ = [
    "User",
]
