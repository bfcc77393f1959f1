"""Async SQLAlchemy engine, session factory and the store lifecycle.

Engine type is determined by the database URL scheme:
  - ``sqlite+aiosqlite://``   -> single-connection SQLite engine (default)
  - ``postgresql+asyncpg://`` -> connection-pooled PostgreSQL engine

Callers never share a process-wide connection: :func:`open_store` bounds
every use of persistent storage and hands out an explicit
:class:`~fingerprinter.state.repository.FingerprintStore`.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from fingerprinter.config import Settings
from fingerprinter.state.repository import FingerprintStore
from fingerprinter.state.sqlite_adapter import create_local_tables, get_local_engine

logger = logging.getLogger(__name__)


def get_engine(
    database_url: str,
    pool_size: int = 5,
    max_overflow: int = 10,
) -> AsyncEngine:
    """Create an async SQLAlchemy engine.

    Parameters
    ----------
    database_url:
        Connection string (SQLite or PostgreSQL scheme).
    pool_size:
        Number of persistent connections for PostgreSQL (ignored for SQLite).
    max_overflow:
        Maximum overflow connections for PostgreSQL (ignored for SQLite).
    """
    if database_url.startswith("sqlite"):
        # sqlite+aiosqlite:///path/to/db, or sqlite+aiosqlite:// for memory
        db_path = database_url.split("///", 1)[-1] if "///" in database_url else ":memory:"
        return get_local_engine(db_path if db_path else ":memory:")

    engine = create_async_engine(
        database_url,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_pre_ping=True,
        pool_recycle=3600,
        echo=False,
    )
    logger.info(
        "Created async engine pool_size=%d max_overflow=%d",
        pool_size,
        max_overflow,
    )
    return engine


@asynccontextmanager
async def get_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Yield an async session with automatic commit/rollback semantics.

    On successful exit the session is committed.  If an exception propagates
    the session is rolled back before the error is re-raised.
    """
    factory = async_sessionmaker(engine, expire_on_commit=False)
    session = factory()
    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()


@asynccontextmanager
async def open_store(settings: Settings) -> AsyncGenerator[FingerprintStore, None]:
    """Open the corpus described by *settings* and close it on exit.

    Tables are created if missing.  The engine is disposed when the block
    exits, whether or not it raised.
    """
    engine = get_engine(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    try:
        await create_local_tables(engine)
        async with get_session(engine) as session:
            yield FingerprintStore(session)
    finally:
        await engine.dispose()
