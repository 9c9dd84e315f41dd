"""Async SQLAlchemy engine, session factory and the per-request session dependency.

PostgreSQL (asyncpg) in deployed environments; tests point ``database_url``
at SQLite via aiosqlite and call ``configure_engine`` themselves.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

import structlog
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from centralapi.config import settings
from centralapi.models.db import Base

logger = structlog.get_logger()

_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _record: Any) -> None:
    # SQLite ignores ON DELETE CASCADE unless this is set per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def configure_engine(url: str | None = None, **engine_kwargs: Any) -> AsyncEngine:
    """(Re)build the engine and session factory. Returns the new engine."""
    global _engine, _session_factory  # noqa: PLW0603
    url = url or settings.database_url
    if url.startswith("postgresql"):
        engine_kwargs.setdefault("pool_pre_ping", True)
    _engine = create_async_engine(url, echo=settings.database_echo, **engine_kwargs)
    if url.startswith("sqlite"):
        event.listen(_engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    _session_factory = async_sessionmaker(_engine, expire_on_commit=False, autoflush=False)
    return _engine


def get_engine() -> AsyncEngine:
    """Lazy-init singleton engine."""
    if _engine is None:
        return configure_engine()
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    if _session_factory is None:
        configure_engine()
    assert _session_factory is not None
    return _session_factory


async def dispose_engine() -> None:
    global _engine, _session_factory  # noqa: PLW0603
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None


async def init_models() -> None:
    """Create all tables. Development and tests only; production uses Alembic."""
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("database_tables_created", tables=sorted(Base.metadata.tables))


async def get_session() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency: one session per request.

    Services commit their own unit of work; anything left uncommitted when
    the request fails is rolled back here.
    """
    async with get_session_factory()() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
