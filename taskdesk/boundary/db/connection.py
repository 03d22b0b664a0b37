"""
Database connection management.

Provides the async SQLAlchemy engine, session factory, and FastAPI dependency
for database session injection.

Dependencies: sqlalchemy, taskdesk.configs
System role: Database connection lifecycle management
"""

from functools import lru_cache
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from taskdesk.configs import get_settings


@lru_cache
def get_async_engine() -> AsyncEngine:
    """
    Create the process-wide async SQLAlchemy engine with connection pooling.

    pool_pre_ping=True verifies connections before use to detect stale/broken
    connections early.

    Returns:
        AsyncEngine: Configured async SQLAlchemy engine

    Raises:
        ArgumentError: If database URL is invalid or engine creation fails

    Usage:
        engine = get_async_engine()
        async with engine.connect() as conn:
            result = await conn.execute(text("SELECT 1"))
    """
    settings = get_settings()
    db_config = settings.database

    return create_async_engine(
        db_config.async_database_url,
        echo=db_config.echo_sql,
        pool_size=db_config.pool_size,
        max_overflow=db_config.max_overflow,
        pool_timeout=db_config.pool_timeout,
        pool_pre_ping=True,
    )


@lru_cache
def get_async_session_factory() -> async_sessionmaker[AsyncSession]:
    """
    Create async session factory for database operations.

    Bound to the shared engine with autoflush=False for explicit transaction
    control and expire_on_commit=False so rows stay readable after commit.

    Returns:
        async_sessionmaker: Async session factory configured for manual transaction control

    Usage:
        SessionFactory = get_async_session_factory()
        async with SessionFactory() as session:
            session.add(obj)
            await session.commit()
    """
    return async_sessionmaker(
        bind=get_async_engine(),
        autoflush=False,
        expire_on_commit=False,
    )


async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency for async database session injection with automatic cleanup.

    Creates a new async database session for each request and ensures it's closed
    after the route completes, even if exceptions occur.

    Yields:
        AsyncSession: Async SQLAlchemy database session (scoped to request lifetime)

    Raises:
        SQLAlchemyError: Propagated from database operations

    Usage:
        from fastapi import Depends

        @router.get("/chat/sessions")
        async def list_sessions(db: AsyncSession = Depends(get_async_db)):
            ...
    """
    SessionFactory = get_async_session_factory()
    async with SessionFactory() as session:
        yield session


async def ping_database(session: AsyncSession) -> bool:
    """
    Run a trivial query to confirm the relational store is reachable.

    Args:
        session: Async database session

    Returns:
        bool: True if SELECT 1 succeeded
    """
    result = await session.execute(text("SELECT 1"))
    return result.scalar_one() == 1
