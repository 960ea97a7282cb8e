"""Runtime state: store handles and crypto settings for one process.

Master/replica routing is decided outside this package; ``AppState``
only holds both handles.
"""

import tempfile
from dataclasses import dataclass, field
from pathlib import Path

import structlog
from sqlalchemy.ext.asyncio import AsyncEngine

from grokloc.config import Level, Settings
from grokloc.core import crypt
from grokloc.core.constants import MIN_KDF_ROUNDS
from grokloc.core.database import (
    SessionFactory,
    create_engine,
    create_schema,
    create_session_factory,
)


logger = structlog.get_logger()


@dataclass
class AppState:
    """Central state access mechanism."""

    level: Level
    master: SessionFactory
    replica: SessionFactory
    kdf_rounds: int
    key: str
    engines: list[AsyncEngine] = field(default_factory=list)
    scratch: tempfile.TemporaryDirectory[str] | None = None

    async def close(self) -> None:
        """Dispose all engines owned by this state and remove scratch files."""
        for engine in self.engines:
            await engine.dispose()
        self.engines.clear()
        if self.scratch is not None:
            self.scratch.cleanup()
            self.scratch = None
        logger.info("state_closed", level=str(self.level))


async def from_settings(settings: Settings) -> AppState:
    """Build state for already-provisioned stores described by settings.

    A key must be configured; this package never generates one for a
    long-lived store.
    """
    if settings.key is None:
        raise ValueError("GROKLOC_KEY must be set")

    master_engine = create_engine(settings.database_url, echo=settings.database_echo)
    engines = [master_engine]
    master = create_session_factory(master_engine)

    if settings.replica_database_url in (None, settings.database_url):
        replica = master
    else:
        replica_engine = create_engine(
            settings.replica_database_url, echo=settings.database_echo
        )
        engines.append(replica_engine)
        replica = create_session_factory(replica_engine)

    logger.info("state_created", level=str(settings.env), kdf_rounds=settings.kdf_rounds)
    return AppState(
        level=settings.env,
        master=master,
        replica=replica,
        kdf_rounds=settings.kdf_rounds,
        key=settings.key,
        engines=engines,
    )


async def unit_state() -> AppState:
    """Build state for unit testing.

    The schema is created anew in a SQLite file under a fresh scratch
    directory, removed again by ``close``. The replica shares the master
    handle and a random key is used.
    """
    scratch = tempfile.TemporaryDirectory(prefix="grokloc-")
    path = Path(scratch.name) / "unit.db"
    engine = create_engine(f"sqlite+aiosqlite:///{path}")
    await create_schema(engine)
    master = create_session_factory(engine)
    return AppState(
        level=Level.UNIT,
        master=master,
        replica=master,
        kdf_rounds=MIN_KDF_ROUNDS,
        key=crypt.random_key(),
        engines=[engine],
        scratch=scratch,
    )
