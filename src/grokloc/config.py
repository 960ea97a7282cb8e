"""Application configuration using pydantic-settings."""

from enum import StrEnum
from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from grokloc.core.constants import (
    DEFAULT_KDF_ROUNDS,
    KEY_LEN,
    MAX_KDF_ROUNDS,
    MIN_KDF_ROUNDS,
)
from grokloc.core.database.session import is_memory_sqlite


class Level(StrEnum):
    """Run level of the process."""

    UNIT = "unit"


class Settings(BaseSettings):
    """Settings loaded from ``GROKLOC_``-prefixed environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="GROKLOC_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    env: Level = Level.UNIT

    # Database
    database_url: str = "sqlite+aiosqlite:///grokloc.db"
    replica_database_url: str | None = None
    database_echo: bool = False

    # Crypto
    kdf_rounds: int = DEFAULT_KDF_ROUNDS
    key: str | None = None

    # Observability
    log_level: str = "INFO"
    log_json: bool = False

    @field_validator("kdf_rounds")
    @classmethod
    def validate_kdf_rounds(cls, v: int) -> int:
        """Validate that the bcrypt cost is within the supported range.

        Raises:
            ValueError: If v is outside MIN_KDF_ROUNDS..MAX_KDF_ROUNDS
        """
        if not MIN_KDF_ROUNDS <= v <= MAX_KDF_ROUNDS:
            raise ValueError(
                f"kdf_rounds must be between {MIN_KDF_ROUNDS} and {MAX_KDF_ROUNDS}"
            )
        return v

    @field_validator("database_url", "replica_database_url")
    @classmethod
    def validate_database_url(cls, v: str | None) -> str | None:
        """Reject in-memory SQLite, which cannot be shared between sessions."""
        if v is not None and is_memory_sqlite(v):
            raise ValueError("in-memory SQLite is not supported; use a file path")
        return v

    @field_validator("key")
    @classmethod
    def validate_key(cls, v: str | None) -> str | None:
        """Validate that a configured key is hex of length KEY_LEN."""
        if v is None:
            return v
        if len(v) != KEY_LEN:
            raise ValueError(f"key must be {KEY_LEN} hex characters")
        try:
            bytes.fromhex(v)
        except ValueError as e:
            raise ValueError("key must be hex encoded") from e
        return v

    @model_validator(mode="after")
    def default_replica(self) -> "Settings":
        # Replica routing is external; without one, reads use the master
        if self.replica_database_url is None:
            self.replica_database_url = self.database_url
        return self


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
