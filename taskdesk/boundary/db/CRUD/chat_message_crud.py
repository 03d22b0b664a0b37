"""
Chat message CRUD operations.

Ordered reads of a session's messages plus last-message lookups for session
listings.

Dependencies: sqlalchemy, taskdesk.boundary.db.models
System role: Chat turn persistence operations
"""

from typing import Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskdesk.boundary.db.CRUD.base_crud import BaseCRUD
from taskdesk.boundary.db.models.chat_message_model import ChatMessageModel


class ChatMessageCRUD(BaseCRUD[ChatMessageModel]):
    """CRUD operations for ChatMessageModel."""

    def __init__(self) -> None:
        """Initialize ChatMessageCRUD with ChatMessageModel."""
        super().__init__(ChatMessageModel)

    async def add_message(
        self,
        session: AsyncSession,
        session_id: str,
        role: str,
        content: str,
        metadata: dict | None = None,
    ) -> ChatMessageModel:
        """
        Insert one message without committing.

        Args:
            session: Async database session
            session_id: Owning chat session id
            role: "user" or "assistant"
            content: Message text
            metadata: Optional JSON metadata

        Returns:
            ChatMessageModel: Flushed message row
        """
        return await self.create(
            session,
            session_id=session_id,
            role=role,
            content=content,
            message_metadata=metadata,
        )

    async def list_for_session(
        self,
        session: AsyncSession,
        session_id: str,
        limit: int | None = None,
    ) -> list[ChatMessageModel]:
        """
        Messages of a session in ascending (created_at, id) order.

        With a limit, the most recent `limit` messages are returned, still
        oldest first.
        """
        if limit is None:
            stmt = (
                select(ChatMessageModel)
                .where(ChatMessageModel.session_id == session_id)
                .order_by(ChatMessageModel.created_at, ChatMessageModel.id)
            )
            result = await session.execute(stmt)
            return list(result.scalars().all())

        stmt = (
            select(ChatMessageModel)
            .where(ChatMessageModel.session_id == session_id)
            .order_by(ChatMessageModel.created_at.desc(), ChatMessageModel.id.desc())
            .limit(limit)
        )
        result = await session.execute(stmt)
        return list(reversed(result.scalars().all()))

    async def count_for_session(self, session: AsyncSession, session_id: str) -> int:
        """Total number of messages stored for a session."""
        stmt = select(func.count()).where(ChatMessageModel.session_id == session_id)
        result = await session.execute(stmt)
        return int(result.scalar_one())

    async def last_message(
        self,
        session: AsyncSession,
        session_id: str,
    ) -> ChatMessageModel | None:
        """Most recent message of a session, if any."""
        stmt = (
            select(ChatMessageModel)
            .where(ChatMessageModel.session_id == session_id)
            .order_by(ChatMessageModel.created_at.desc(), ChatMessageModel.id.desc())
            .limit(1)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()


chat_message_crud = ChatMessageCRUD()
