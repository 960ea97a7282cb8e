"""Pytest configuration and shared fixtures."""

from collections.abc import AsyncGenerator

import pytest

from grokloc.core import crypt
from grokloc.core.constants import MIN_KDF_ROUNDS
from grokloc.core.safe import SafeValue
from grokloc.state import AppState, unit_state


@pytest.fixture
async def state() -> AsyncGenerator[AppState, None]:
    """Provide unit state backed by a fresh scratch store.

    Yields:
        AppState with the schema applied
    """
    app_state = await unit_state()
    yield app_state
    await app_state.close()


@pytest.fixture
def key() -> str:
    """Provide a random symmetric key."""
    return crypt.random_key()


@pytest.fixture
def derived_password() -> SafeValue:
    """Provide a cheaply derived password."""
    return SafeValue(crypt.kdf(crypt.random_hex(), MIN_KDF_ROUNDS))
