"""Async engine and session factory construction."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import event
from sqlalchemy.engine import Connection, make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)


SessionFactory = async_sessionmaker[AsyncSession]

SQLITE_BUSY_TIMEOUT = 30.0


def is_memory_sqlite(url: str) -> bool:
    """Determine if a URL names a private in-memory SQLite database."""
    parsed = make_url(url)
    return parsed.get_backend_name() == "sqlite" and parsed.database in (
        None,
        "",
        ":memory:",
    )


def create_engine(url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine for a database URL.

    Every session gets its own pooled connection. SQLite transactions
    are opened with ``BEGIN IMMEDIATE`` so concurrent writers queue on
    the database lock instead of sharing uncommitted state.

    Raises:
        ValueError: If url names an in-memory SQLite database, which
            exists per connection and cannot be shared between sessions
    """
    if is_memory_sqlite(url):
        raise ValueError("in-memory SQLite is not supported; use a file path")

    if make_url(url).get_backend_name() != "sqlite":
        return create_async_engine(
            url,
            echo=echo,
            pool_pre_ping=True,  # Verify connections before use
        )

    engine = create_async_engine(
        url,
        echo=echo,
        connect_args={"timeout": SQLITE_BUSY_TIMEOUT},
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection: Any, _connection_record: Any) -> None:
        # Stop the driver from emitting its own deferred BEGIN
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn: Connection) -> None:
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


def create_session_factory(engine: AsyncEngine) -> SessionFactory:
    """Create a session factory bound to an engine."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@asynccontextmanager
async def transaction(factory: SessionFactory) -> AsyncGenerator[AsyncSession, None]:
    """Open a session with a transaction that commits on success.

    Any exception raised inside the block rolls the transaction back
    and propagates.

    Usage:
        async with transaction(factory) as session:
            await user.insert(session)
    """
    async with factory() as session, session.begin():
        yield session
