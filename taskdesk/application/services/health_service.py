"""
Health service.

Reports liveness of the relational store and the short-term cache.

Dependencies: taskdesk.boundary.db.connection, taskdesk.boundary.cache
System role: Health checks for the chat backend
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from taskdesk.boundary.cache.history_cache import HistoryCache
from taskdesk.boundary.db.connection import ping_database
from taskdesk.models.health import AIHealthResponse

logger = logging.getLogger(__name__)


class HealthService:
    """Health check orchestrator."""

    def __init__(self, db: AsyncSession, cache: HistoryCache) -> None:
        self.db = db
        self.cache = cache

    async def check(self) -> AIHealthResponse:
        """
        Probe the database and the cache.

        Returns:
            AIHealthResponse: ok is always True when the service answers
        """
        try:
            db_ok = await ping_database(self.db)
        except Exception as e:
            logger.warning(f"{__name__}:check - Database ping failed: {type(e).__name__}: {e}")
            db_ok = False
        cache_ok = await self.cache.ping()
        return AIHealthResponse(ok=True, db=db_ok, cache=cache_ok)
