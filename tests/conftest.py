"""
Shared test fixtures and configuration for entire test suite.

Provides: In-memory SQLite database, in-memory Redis stand-in, history cache,
mock model invoker and sample content rows
Dependencies: pytest, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from taskdesk.boundary.cache.history_cache import HistoryCache
from taskdesk.boundary.llm.model_invoker import ModelInvoker
from taskdesk.core.bot.fallback import build_fallback_answer


class InMemoryRedis:
    """Minimal async stand-in for the redis client calls the cache makes."""

    def __init__(self) -> None:
        self.store: dict[str, str] = {}
        self.expiry: dict[str, int] = {}
        self.fail = False

    def _check(self) -> None:
        if self.fail:
            raise ConnectionError("redis down")

    async def ping(self) -> bool:
        self._check()
        return True

    async def get(self, key: str) -> str | None:
        self._check()
        return self.store.get(key)

    async def set(self, key: str, value: str, ex: int | None = None) -> bool:
        self._check()
        self.store[key] = value
        if ex is not None:
            self.expiry[key] = ex
        return True

    async def delete(self, key: str) -> int:
        self._check()
        return 1 if self.store.pop(key, None) is not None else 0

    async def aclose(self) -> None:
        return None


@pytest.fixture
async def test_async_db():
    """
    Create in-memory SQLite async database for testing.

    Yields:
        AsyncSession: Test database session with cleanup
    """
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
    from sqlalchemy.pool import StaticPool

    from taskdesk.boundary.db import models  # noqa: F401
    from taskdesk.boundary.db.base import Base

    # Use SQLite in-memory database for tests
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    # Create session factory
    async_session = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    # Create session for test
    async with async_session() as session:
        yield session
        await session.rollback()

    # Cleanup
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def fake_redis() -> InMemoryRedis:
    """Provide in-memory redis stand-in."""
    return InMemoryRedis()


@pytest.fixture
def history_cache(fake_redis: InMemoryRedis) -> HistoryCache:
    """Provide history cache backed by the in-memory redis stand-in."""
    return HistoryCache(client=fake_redis, ttl_seconds=3600, max_messages=12)


@pytest.fixture
def mock_invoker() -> MagicMock:
    """
    Create mock ModelInvoker.

    complete returns a fixed Hebrew answer, embed a small vector, and
    fallback_answer uses the real deterministic builder.
    """
    invoker = MagicMock(spec=ModelInvoker)
    invoker.complete = AsyncMock(return_value="תשובה מהמודל")
    invoker.embed = AsyncMock(return_value=[0.1, 0.2, 0.3])
    invoker.fallback_answer = MagicMock(side_effect=build_fallback_answer)
    return invoker
