"""
Chat session ORM model.

A conversation with the bot; owns its messages and cascades their deletion.

Dependencies: sqlalchemy, taskdesk.boundary.db.base
System role: Session persistence for chat context management
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from taskdesk.boundary.db.base import Base, StringIdMixin, TimestampMixin

TITLE_MAX_LENGTH = 60
DEFAULT_TITLE = "שיחה חדשה"


class ChatSessionModel(Base, StringIdMixin, TimestampMixin):
    """
    Chat session ORM model.

    Attributes:
        id: Opaque string id (client-supplied or generated)
        title: Derived from the first question, truncated
        messages: Ordered chat messages (cascade delete)
        created_at: Session creation timestamp (UTC)
        updated_at: Bumped on every assistant turn
    """

    __tablename__ = "chat_sessions"

    title: Mapped[str] = mapped_column(
        String(TITLE_MAX_LENGTH),
        nullable=False,
        default=DEFAULT_TITLE,
    )

    messages = relationship(
        "ChatMessageModel",
        back_populates="session",
        cascade="all, delete-orphan",
        order_by="(ChatMessageModel.created_at, ChatMessageModel.id)",
    )
