"""
Short-term chat history cache.

Keeps the most recent messages of each session in Redis under
`chat:session:{id}` with a TTL. Every operation is best effort: failures
are logged and surface as a miss or a no-op, never as an error.

Dependencies: redis.asyncio, pydantic, taskdesk.configs
System role: Read-through cache in front of chat message storage
"""

import json
import logging
from typing import Any

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError
from redis.asyncio import Redis

from taskdesk.configs import get_settings
from taskdesk.core.capabilities import CACHE, CapabilityRegistry
from taskdesk.models.session import ChatMessageView

logger = logging.getLogger(__name__)


class CachedHistory(BaseModel):
    """Cached tail of a conversation and the conversation's full length."""

    total: int = Field(ge=0)
    messages: list[ChatMessageView] = Field(default_factory=list)

    def covers(self, limit: int | None) -> bool:
        """
        Whether this entry can answer a history read on its own.

        True when the entry holds the whole conversation, or at least the
        requested number of most recent messages.
        """
        if self.total <= len(self.messages):
            return True
        return limit is not None and len(self.messages) >= limit

    def tail(self, limit: int | None) -> list[ChatMessageView]:
        if limit is None:
            return list(self.messages)
        return self.messages[-limit:] if limit > 0 else []


class HistoryCache:
    """
    Redis-backed history cache.

    Attributes:
        client: redis.asyncio client, None when caching is disabled
        ttl_seconds: Expiry applied on every write
        max_messages: Number of most recent messages stored per session
        key_prefix: Key namespace
        capabilities: Registry memoizing whether Redis answered its first ping
    """

    def __init__(
        self,
        client: Redis | None,
        ttl_seconds: int = 3600,
        max_messages: int = 12,
        key_prefix: str = "chat:session:",
        capabilities: CapabilityRegistry | None = None,
    ) -> None:
        self.client = client
        self.ttl_seconds = ttl_seconds
        self.max_messages = max_messages
        self.key_prefix = key_prefix
        self.capabilities = capabilities

    @classmethod
    def from_settings(cls, capabilities: CapabilityRegistry | None = None) -> "HistoryCache":
        """Build the cache from REDIS_* settings; disabled cache has no client."""
        config = get_settings().cache
        client = None
        if config.enabled:
            client = Redis.from_url(
                config.url,
                decode_responses=True,
                socket_timeout=config.socket_timeout,
                socket_connect_timeout=config.socket_timeout,
            )
        return cls(
            client=client,
            ttl_seconds=config.history_ttl_seconds,
            max_messages=config.history_max_messages,
            key_prefix=config.key_prefix,
            capabilities=capabilities,
        )

    @property
    def enabled(self) -> bool:
        return self.client is not None

    def key(self, session_id: str) -> str:
        return f"{self.key_prefix}{session_id}"

    async def available(self) -> bool:
        """Whether cache operations should run; the first check is memoized."""
        if self.client is None:
            return False
        if self.capabilities is None:
            return True
        return await self.capabilities.ensure(CACHE, self.ping)

    async def ping(self) -> bool:
        """Liveness check; False when disabled or unreachable."""
        if self.client is None:
            return False
        try:
            return bool(await self.client.ping())
        except Exception as e:
            logger.warning(f"{__name__}:ping - Redis unreachable: {type(e).__name__}: {e}")
            return False

    async def get(self, session_id: str) -> CachedHistory | None:
        """
        Read a session's cached history.

        Returns:
            CachedHistory | None: None on miss, disabled cache, or any failure
        """
        if not await self.available():
            return None
        try:
            raw = await self.client.get(self.key(session_id))
        except Exception as e:
            logger.warning(f"{__name__}:get - Cache read failed: {type(e).__name__}: {e}")
            return None
        if not raw:
            return None
        try:
            return CachedHistory.model_validate(json.loads(raw))
        except (ValueError, PydanticValidationError) as e:
            logger.warning(f"{__name__}:get - Discarding malformed entry for {session_id}: {e}")
            return None

    async def store(
        self,
        session_id: str,
        messages: list[ChatMessageView],
        total: int,
    ) -> None:
        """
        Write the most recent messages of a session with the configured TTL.

        Args:
            session_id: Chat session id
            messages: Messages in ascending order (trimmed to max_messages)
            total: Number of messages in the whole conversation
        """
        if not await self.available():
            return
        entry = CachedHistory(total=total, messages=messages[-self.max_messages:])
        payload: dict[str, Any] = entry.model_dump(mode="json", by_alias=True)
        try:
            await self.client.set(
                self.key(session_id),
                json.dumps(payload, ensure_ascii=False),
                ex=self.ttl_seconds,
            )
        except Exception as e:
            logger.warning(f"{__name__}:store - Cache write failed: {type(e).__name__}: {e}")

    async def evict(self, session_id: str) -> None:
        """Remove a session's entry; failures are logged only."""
        if not await self.available():
            return
        try:
            await self.client.delete(self.key(session_id))
        except Exception as e:
            logger.warning(f"{__name__}:evict - Cache delete failed: {type(e).__name__}: {e}")

    async def close(self) -> None:
        if self.client is not None:
            await self.client.aclose()
