"""
Dependency injection container.

Process-wide singletons (model invoker, history cache, vector store, web
search client, locks, capability registry) plus per-request service
factories for FastAPI dependencies.

Dependencies: taskdesk.configs, taskdesk.application, taskdesk.boundary
System role: DI container for service injection
"""

import asyncio
from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from taskdesk.application.services import (
    ChatService,
    EmbeddingService,
    HealthService,
    RetrievalService,
    SessionService,
    TableAnswerService,
)
from taskdesk.boundary.cache.history_cache import HistoryCache
from taskdesk.boundary.db import get_async_db, get_async_session_factory
from taskdesk.boundary.llm.model_invoker import ModelInvoker
from taskdesk.boundary.vdb.pgvector_store import PgVectorStore
from taskdesk.boundary.web.web_search_client import WebSearchClient
from taskdesk.configs import Settings, get_settings
from taskdesk.core.capabilities import CapabilityRegistry
from taskdesk.core.keyed_lock import KeyedLock


class ServiceCache:
    """Container for cached service instances."""

    def __init__(self):
        self._capabilities = None
        self._model_invoker = None
        self._history_cache = None
        self._vector_store = None
        self._web_client = None
        self._session_locks = None
        self._rebuild_lock = None

    @property
    def capabilities(self) -> CapabilityRegistry:
        """Get cached capability registry."""
        if self._capabilities is None:
            self._capabilities = CapabilityRegistry()
        return self._capabilities

    @property
    def model_invoker(self) -> ModelInvoker:
        """Get cached model invoker for the configured provider."""
        if self._model_invoker is None:
            self._model_invoker = ModelInvoker.from_settings()
        return self._model_invoker

    @property
    def history_cache(self) -> HistoryCache:
        """Get cached Redis history cache."""
        if self._history_cache is None:
            self._history_cache = HistoryCache.from_settings(capabilities=self.capabilities)
        return self._history_cache

    @property
    def vector_store(self) -> PgVectorStore:
        """Get cached pgvector store."""
        if self._vector_store is None:
            self._vector_store = PgVectorStore(
                session_factory=get_async_session_factory(),
                capabilities=self.capabilities,
            )
        return self._vector_store

    @property
    def web_client(self) -> WebSearchClient:
        """Get cached web search client."""
        if self._web_client is None:
            self._web_client = WebSearchClient.from_settings()
        return self._web_client

    @property
    def session_locks(self) -> KeyedLock:
        """Per-session locks serializing chat turns."""
        if self._session_locks is None:
            self._session_locks = KeyedLock()
        return self._session_locks

    @property
    def rebuild_lock(self) -> asyncio.Lock:
        """Lock allowing one embeddings rebuild at a time."""
        if self._rebuild_lock is None:
            self._rebuild_lock = asyncio.Lock()
        return self._rebuild_lock

    async def aclose(self) -> None:
        """Release network resources held by cached clients."""
        if self._history_cache is not None:
            await self._history_cache.close()

    def clear(self) -> None:
        """Clear all cached instances."""
        self._capabilities = None
        self._model_invoker = None
        self._history_cache = None
        self._vector_store = None
        self._web_client = None
        self._session_locks = None
        self._rebuild_lock = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


@lru_cache
def get_settings_dependency() -> Settings:
    """Get settings singleton."""
    return get_settings()


def get_history_cache() -> HistoryCache:
    """Get the shared history cache."""
    return get_service_cache().history_cache


def get_session_service(
    db: AsyncSession = Depends(get_async_db),
    cache: HistoryCache = Depends(get_history_cache),
) -> SessionService:
    """
    Get session service instance.

    Args:
        db: Async database session (injected via Depends)
        cache: Shared history cache (injected via Depends)

    Returns:
        SessionService: Session service instance
    """
    return SessionService(db=db, cache=cache)


def get_embedding_service(db: AsyncSession = Depends(get_async_db)) -> EmbeddingService:
    """
    Get embedding service instance.

    Args:
        db: Async database session (injected via Depends)

    Returns:
        EmbeddingService: Embedding service bound to the shared store and rebuild lock
    """
    cache = get_service_cache()
    return EmbeddingService(
        db=db,
        store=cache.vector_store,
        invoker=cache.model_invoker,
        rebuild_lock=cache.rebuild_lock,
        config=get_settings().vector_store,
    )


def get_retrieval_service(
    db: AsyncSession = Depends(get_async_db),
    embeddings: EmbeddingService = Depends(get_embedding_service),
) -> RetrievalService:
    """
    Get retrieval service instance.

    Args:
        db: Async database session (injected via Depends)
        embeddings: Embedding service for the vector stage

    Returns:
        RetrievalService: Retrieval service instance
    """
    return RetrievalService(
        db=db,
        embeddings=embeddings,
        web_client=get_service_cache().web_client,
        config=get_settings().retrieval,
    )


def get_chat_service(
    db: AsyncSession = Depends(get_async_db),
    sessions: SessionService = Depends(get_session_service),
    retrieval: RetrievalService = Depends(get_retrieval_service),
) -> ChatService:
    """
    Get chat service instance.

    Args:
        db: Async database session (injected via Depends)
        sessions: Session service sharing the request's database session
        retrieval: Retrieval service sharing the request's database session

    Returns:
        ChatService: Chat service with the shared model invoker and session locks
    """
    cache = get_service_cache()
    return ChatService(
        sessions=sessions,
        retrieval=retrieval,
        tables=TableAnswerService(db=db),
        invoker=cache.model_invoker,
        session_locks=cache.session_locks,
        config=get_settings().retrieval,
    )


def get_health_service(
    db: AsyncSession = Depends(get_async_db),
    cache: HistoryCache = Depends(get_history_cache),
) -> HealthService:
    """Get health service instance."""
    return HealthService(db=db, cache=cache)
