"""Unit tests for settings."""

import pytest
from pydantic import ValidationError

from grokloc.config import Level, Settings
from grokloc.core import crypt
from grokloc.core.constants import DEFAULT_KDF_ROUNDS


pytestmark = pytest.mark.unit


class TestSettings:
    """Tests for Settings validation."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("GROKLOC_ENV", raising=False)
        settings = Settings(_env_file=None)

        assert settings.env is Level.UNIT
        assert settings.kdf_rounds == DEFAULT_KDF_ROUNDS
        assert settings.replica_database_url == settings.database_url

    def test_env_prefix(self, monkeypatch: pytest.MonkeyPatch):
        key = crypt.random_key()
        monkeypatch.setenv("GROKLOC_KEY", key)
        monkeypatch.setenv("GROKLOC_KDF_ROUNDS", "5")

        settings = Settings(_env_file=None)

        assert settings.key == key
        assert settings.kdf_rounds == 5

    def test_unknown_level(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, env="production")

    @pytest.mark.parametrize("rounds", [3, 32])
    def test_kdf_rounds_range(self, rounds: int):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, kdf_rounds=rounds)

    @pytest.mark.parametrize("key", ["abc", "z" * 32])
    def test_bad_key(self, key: str):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, key=key)

    def test_explicit_replica(self):
        settings = Settings(
            _env_file=None,
            database_url="sqlite+aiosqlite:///master.db",
            replica_database_url="sqlite+aiosqlite:///replica.db",
        )

        assert settings.replica_database_url == "sqlite+aiosqlite:///replica.db"

    @pytest.mark.parametrize(
        "field",
        ["database_url", "replica_database_url"],
    )
    def test_memory_sqlite_rejected(self, field: str):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, **{field: "sqlite+aiosqlite:///:memory:"})
