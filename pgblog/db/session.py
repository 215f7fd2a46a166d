"""
Database Session Management

This module configures the async SQLAlchemy engine and session factory.
It provides the core database connectivity for the entire package.

Key Concepts:
=============

1. ENGINE: The database connection manager
   - Maintains a pool of database connections
   - Created once by init_db(), released by close_db()

2. SESSION: A unit of work with the database
   - Tracks changes to objects (dirty, new, deleted)
   - Commits or rolls back as a transaction

3. SESSION FACTORY: Creates new sessions
   - get_session_factory()() creates a new session
   - Sessions are NOT safe to share between concurrent tasks

Connection Pool:
================
┌─────────────────────────────────────────────────────────────────────────────┐
│                        CONNECTION POOL                                      │
├─────────────────────────────────────────────────────────────────────────────┤
│                                                                             │
│   Pool of Connections:                                                      │
│   ┌────┐ ┌────┐ ┌────┐ ┌────┐ ┌────┐    pool_size    = 10                   │
│   │ C1 │ │ C2 │ │ C3 │ │ C4 │ │ C5 │ ...                                    │
│   └────┘ └────┘ └────┘ └────┘ └────┘                                        │
│                                                                             │
│   Overflow (temporary):                                                     │
│   ┌────┐ ┌────┐ ┌────┐                  max_overflow = 10                   │
│   │ O1 │ │ O2 │ │ O3 │ ...                                                  │
│   └────┘ └────┘ └────┘                                                      │
│                                                                             │
│   connect timeout = 10s, connections recycled after 30s                     │
│                                                                             │
└─────────────────────────────────────────────────────────────────────────────┘

Scopes:
=======
    session_scope()
        One unit of work. Commit on success, rollback on exception.

    transaction(isolation_level="SERIALIZABLE")
        Same, but the transaction is opened explicitly so the isolation
        level and access mode apply to it.

Usage:
======
    from pgblog.db import init_db, close_db, session_scope

    await init_db()
    async with session_scope() as session:
        repo = UserRepository(session)
        user = await repo.create(email="alice@example.com", name="Alice")
    await close_db()
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Literal, Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from pgblog.config.settings import async_database_url, get_settings
from pgblog.core.exceptions import DatabaseNotInitializedError
from pgblog.core.logging import get_logger


logger = get_logger("pgblog.db")

IsolationLevel = Literal["READ COMMITTED", "REPEATABLE READ", "SERIALIZABLE"]

# Process-wide handles, set by init_db() and cleared by close_db()
_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


# ═══════════════════════════════════════════════════════════════════════════════
# ENGINE & SESSION FACTORY
# ═══════════════════════════════════════════════════════════════════════════════


def create_engine(database_url: Optional[str] = None) -> AsyncEngine:
    """
    Build an async engine using the pool settings from configuration.

    Args:
        database_url: Override for settings.DATABASE_URL (plain
            ``postgresql://`` URLs are rewritten to asyncpg)

    Returns:
        AsyncEngine bound to the asyncpg driver
    """
    settings = get_settings()
    return create_async_engine(
        async_database_url(database_url) if database_url else settings.DATABASE_URL,
        # Log SQL statements if DEBUG mode is enabled
        echo=settings.DEBUG,
        pool_size=settings.DATABASE_POOL_SIZE,
        max_overflow=settings.DATABASE_MAX_OVERFLOW,
        pool_recycle=settings.DATABASE_IDLE_TIMEOUT,
        pool_pre_ping=True,
        connect_args={"timeout": settings.DATABASE_CONNECT_TIMEOUT},
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Create the session factory for an engine.

    expire_on_commit=False keeps returned rows usable after commit, which
    matters because async sessions cannot lazy-load expired attributes.
    """
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


def get_engine() -> AsyncEngine:
    """Return the process-wide engine."""
    if _engine is None:
        raise DatabaseNotInitializedError()
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the process-wide session factory."""
    if _session_factory is None:
        raise DatabaseNotInitializedError()
    return _session_factory


# ═══════════════════════════════════════════════════════════════════════════════
# SCOPES
# ═══════════════════════════════════════════════════════════════════════════════


@asynccontextmanager
async def session_scope() -> AsyncIterator[AsyncSession]:
    """
    Provide a session for one unit of work.

    Lifecycle:
        1. Create new session from pool
        2. Yield session to the caller
        3. If no exception: commit changes
        4. If exception: rollback changes and re-raise
        5. Always: close session (return connection to pool)

    Example:
        async with session_scope() as session:
            user = await UserRepository(session).create(email=..., name=...)
    """
    async with get_session_factory()() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def transaction(
    isolation_level: Optional[IsolationLevel] = None,
    read_only: bool = False,
) -> AsyncIterator[AsyncSession]:
    """
    Open an explicit transaction with optional isolation level.

    The isolation level and access mode are applied to this transaction's
    connection only; the pool default is restored when it is returned.

    Args:
        isolation_level: "READ COMMITTED", "REPEATABLE READ" or "SERIALIZABLE"
        read_only: Start the transaction READ ONLY

    Example:
        async with transaction(isolation_level="SERIALIZABLE") as session:
            ...

    Raises:
        sqlalchemy.exc.DBAPIError: Serialization failures are not retried
    """
    options: dict[str, object] = {}
    if isolation_level:
        options["isolation_level"] = isolation_level
    if read_only:
        options["postgresql_readonly"] = True

    async with get_session_factory()() as session:
        async with session.begin():
            if options:
                await session.connection(execution_options=options)
            yield session


# ═══════════════════════════════════════════════════════════════════════════════
# LIFECYCLE FUNCTIONS
# ═══════════════════════════════════════════════════════════════════════════════


async def init_db(database_url: Optional[str] = None) -> AsyncEngine:
    """
    Initialize the database connection pool.

    This function:
    1. Creates the engine and session factory (once per process)
    2. Tests the database connection
    3. Raises exception if connection fails

    Args:
        database_url: Override for settings.DATABASE_URL

    Returns:
        The process-wide engine

    Raises:
        ConfigurationError: If DATABASE_URL is not configured
        Exception: If the database connection fails
    """
    global _engine, _session_factory

    if _engine is not None:
        return _engine

    logger.info("Initializing database connection")
    engine = create_engine(database_url)
    try:
        async with engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.error("Failed to connect to database", error=str(e))
        await engine.dispose()
        raise

    _engine = engine
    _session_factory = create_session_factory(engine)
    logger.info("Database connection established successfully")
    return engine


async def close_db() -> None:
    """
    Close the database connection pool.

    Disposes of the engine, closing all pooled connections. Safe to call
    when the database was never initialized.
    """
    global _engine, _session_factory

    if _engine is None:
        return

    logger.info("Closing database connection")
    await _engine.dispose()
    _engine = None
    _session_factory = None
    logger.info("Database connection closed successfully")
