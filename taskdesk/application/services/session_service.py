"""
Session service orchestrator.

Coordinates chat session lifecycle and history reads: sessions are created
on first use, turns are appended inside the request transaction, and
history is served from the short-term cache when the cached entry is
sufficient.

Dependencies: taskdesk.boundary.db.CRUD, taskdesk.boundary.cache
System role: Session use case orchestration
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from taskdesk.boundary.cache.history_cache import HistoryCache
from taskdesk.boundary.db.CRUD.chat_message_crud import chat_message_crud
from taskdesk.boundary.db.CRUD.chat_session_crud import chat_session_crud
from taskdesk.boundary.db.models.chat_message_model import ChatMessageModel, MessageRole
from taskdesk.boundary.db.models.chat_session_model import ChatSessionModel
from taskdesk.core.exceptions import PersistenceError, SessionNotFoundError, ValidationError
from taskdesk.models.session import ChatMessageView, SessionSummary

logger = logging.getLogger(__name__)

VALID_ROLES = {role.value for role in MessageRole}


def to_view(message: ChatMessageModel) -> ChatMessageView:
    """Convert a message row to its API/cache representation."""
    return ChatMessageView(
        role=message.role,
        content=message.content,
        created_at=message.created_at,
        metadata=message.message_metadata,
    )


class SessionService:
    """Session service orchestrator."""

    def __init__(self, db: AsyncSession, cache: HistoryCache) -> None:
        """
        Initialize session service.

        Args:
            db: Async SQLAlchemy session (request scoped)
            cache: Short-term history cache
        """
        self.db = db
        self.cache = cache

    async def ensure_session(
        self,
        session_id: str | None = None,
        title_hint: str | None = None,
    ) -> ChatSessionModel:
        """
        Return the existing session or create a new one.

        Args:
            session_id: Client-supplied id; a new id is generated when None
            title_hint: Text the title of a new session is derived from

        Returns:
            ChatSessionModel: Existing or newly flushed session
        """
        if session_id:
            existing = await chat_session_crud.get_by_id(self.db, session_id)
            if existing is not None:
                return existing

        chat_session = await chat_session_crud.create_session(
            self.db,
            session_id=session_id,
            title_hint=title_hint,
        )
        logger.info(f"{__name__}:ensure_session - Created session {chat_session.id}")
        return chat_session

    async def append_turn(
        self,
        session_id: str,
        role: str,
        content: str,
        metadata: dict | None = None,
        title_hint: str | None = None,
    ) -> ChatMessageModel:
        """
        Add one message to the pending transaction.

        An assistant turn also bumps the session's updated_at and fills in a
        missing title.

        Args:
            session_id: Owning session id
            role: "user" or "assistant"
            content: Message text
            metadata: Optional JSON metadata
            title_hint: Title source used when the session has none

        Returns:
            ChatMessageModel: Flushed (uncommitted) message

        Raises:
            ValidationError: If role is not user or assistant
            SessionNotFoundError: If the session does not exist
        """
        if role not in VALID_ROLES:
            raise ValidationError(f"Unsupported message role: {role}", field="role")

        chat_session = await chat_session_crud.get_by_id(self.db, session_id)
        if chat_session is None:
            raise SessionNotFoundError(session_id)

        message = await chat_message_crud.add_message(
            self.db,
            session_id=session_id,
            role=role,
            content=content,
            metadata=metadata,
        )
        if role == MessageRole.ASSISTANT.value:
            await chat_session_crud.touch(self.db, chat_session, title_hint=title_hint)
        return message

    async def commit_turns(self, session_id: str | None = None) -> None:
        """
        Commit pending turns as one transaction.

        Raises:
            PersistenceError: If the commit fails (the transaction is rolled back)
        """
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"{__name__}:commit_turns - {type(e).__name__}: {e}")
            raise PersistenceError(
                "Failed to persist chat turns",
                session_id=session_id,
                details={"error": type(e).__name__},
            ) from e

    async def get_history(
        self,
        session_id: str,
        limit: int | None = None,
    ) -> list[ChatMessageView]:
        """
        Messages of a session in ascending order.

        Served from the cache when the entry covers the whole conversation or
        holds at least `limit` messages; otherwise read from the database and
        written back to the cache.

        Args:
            session_id: Chat session id
            limit: Most recent messages to return, None for all

        Returns:
            list[ChatMessageView]: Possibly empty
        """
        cached = await self.cache.get(session_id)
        if cached is not None and cached.covers(limit):
            return cached.tail(limit)

        rows = await chat_message_crud.list_for_session(self.db, session_id, limit=limit)
        messages = [to_view(row) for row in rows]
        if messages:
            total = await chat_message_crud.count_for_session(self.db, session_id)
            await self.cache.store(session_id, messages, total)
        return messages

    async def refresh_cache(self, session_id: str) -> None:
        """Rewrite the cache entry from the database (best effort)."""
        if not self.cache.enabled:
            return
        try:
            rows = await chat_message_crud.list_for_session(
                self.db,
                session_id,
                limit=self.cache.max_messages,
            )
            total = await chat_message_crud.count_for_session(self.db, session_id)
        except SQLAlchemyError as e:
            logger.warning(f"{__name__}:refresh_cache - {type(e).__name__}: {e}")
            return
        await self.cache.store(session_id, [to_view(row) for row in rows], total)

    async def list_sessions(self) -> list[SessionSummary]:
        """
        All sessions, newest-updated first, with the latest message as preview.

        Returns:
            list[SessionSummary]
        """
        sessions = await chat_session_crud.list_recent(self.db)
        summaries = []
        for chat_session in sessions:
            last = await chat_message_crud.last_message(self.db, chat_session.id)
            summaries.append(
                SessionSummary(
                    id=chat_session.id,
                    title=chat_session.title,
                    updated_at=chat_session.updated_at,
                    last_message=last.content if last is not None else "",
                )
            )
        return summaries

    async def delete_session(self, session_id: str) -> None:
        """
        Delete a session and all of its messages.

        Args:
            session_id: Chat session id

        Raises:
            SessionNotFoundError: If the session does not exist
            PersistenceError: If the delete cannot be committed
        """
        chat_session = await chat_session_crud.get_by_id(self.db, session_id)
        if chat_session is None:
            raise SessionNotFoundError(session_id)

        await self.db.delete(chat_session)
        await self.commit_turns(session_id)
        await self.cache.evict(session_id)
        logger.info(f"{__name__}:delete_session - Deleted session {session_id}")
