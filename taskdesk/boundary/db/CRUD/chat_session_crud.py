"""
Chat session CRUD operations.

Provides Create, Read, Delete operations for ChatSessionModel with
listing by recency.

Dependencies: sqlalchemy, taskdesk.boundary.db.models
System role: Chat session persistence operations
"""

from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskdesk.boundary.db.base import utcnow
from taskdesk.boundary.db.CRUD.base_crud import BaseCRUD
from taskdesk.boundary.db.models.chat_session_model import (
    DEFAULT_TITLE,
    TITLE_MAX_LENGTH,
    ChatSessionModel,
)


def derive_title(hint: str | None) -> str:
    """First characters of the hint, or the default title when blank."""
    cleaned = (hint or "").strip()
    if not cleaned:
        return DEFAULT_TITLE
    return cleaned[:TITLE_MAX_LENGTH]


class ChatSessionCRUD(BaseCRUD[ChatSessionModel]):
    """
    CRUD operations for ChatSessionModel.

    Extends BaseCRUD with recency listing and activity bumping.
    """

    def __init__(self) -> None:
        """Initialize ChatSessionCRUD with ChatSessionModel."""
        super().__init__(ChatSessionModel)

    async def create_session(
        self,
        session: AsyncSession,
        session_id: str | None = None,
        title_hint: str | None = None,
    ) -> ChatSessionModel:
        """
        Create a chat session with a derived title.

        Args:
            session: Async database session
            session_id: Explicit id, generated when None
            title_hint: Text the title is derived from

        Returns:
            ChatSessionModel: Newly flushed session row
        """
        fields = {"title": derive_title(title_hint)}
        if session_id:
            fields["id"] = session_id
        return await self.create(session, **fields)

    async def list_recent(
        self,
        session: AsyncSession,
        limit: int | None = None,
    ) -> Sequence[ChatSessionModel]:
        """
        Sessions ordered newest-updated first.

        Args:
            session: Async database session
            limit: Maximum number of sessions to return

        Returns:
            Sequence of ChatSessionModel
        """
        stmt = select(ChatSessionModel).order_by(
            ChatSessionModel.updated_at.desc(),
            ChatSessionModel.id,
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def touch(
        self,
        session: AsyncSession,
        chat_session: ChatSessionModel,
        title_hint: str | None = None,
    ) -> ChatSessionModel:
        """
        Bump updated_at and fill in a missing title.

        Runs inside the caller's transaction; nothing is committed here.
        """
        chat_session.updated_at = utcnow()
        if not chat_session.title or chat_session.title == DEFAULT_TITLE:
            if title_hint and title_hint.strip():
                chat_session.title = derive_title(title_hint)
        await session.flush()
        return chat_session


chat_session_crud = ChatSessionCRUD()
