"""
Chat message ORM model.

One immutable user or assistant turn within a chat session.

Dependencies: sqlalchemy, taskdesk.boundary.db.base
System role: Chat turn persistence
"""

import enum
from datetime import datetime

from sqlalchemy import JSON, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from taskdesk.boundary.db.base import Base, utcnow


class MessageRole(str, enum.Enum):
    """Author of a chat message."""

    USER = "user"
    ASSISTANT = "assistant"


class ChatMessageModel(Base):
    """
    Chat message ORM model.

    Ordered by (created_at, id); the autoincrement id breaks ties between
    turns written in the same transaction.

    Attributes:
        id: Autoincrement primary key
        session_id: Owning chat session (ON DELETE CASCADE)
        role: "user" or "assistant"
        content: Plain text content
        message_metadata: Context/web snapshot for assistant messages
        created_at: Creation timestamp (UTC)
    """

    __tablename__ = "chat_messages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    session_id: Mapped[str] = mapped_column(
        ForeignKey("chat_sessions.id", ondelete="CASCADE"),
        nullable=False,
    )
    role: Mapped[str] = mapped_column(String(16), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    message_metadata: Mapped[dict | None] = mapped_column(
        "metadata",
        JSON,
        nullable=True,
        default=None,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )

    session = relationship("ChatSessionModel", back_populates="messages")

    __table_args__ = (
        Index("ix_chat_messages_session_created", "session_id", "created_at"),
    )
