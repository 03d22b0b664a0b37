"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, VectorBase, StringIdMixin, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(), get_async_db(): Async connection management
  - Chat and content ORM models
  - CRUD operation singletons

Dependencies: sqlalchemy, taskdesk.configs
System role: Database adapter providing persistent storage for chat sessions
and messages, plus read access to collaborator content.
"""

from taskdesk.boundary.db.base import Base, StringIdMixin, TimestampMixin, VectorBase
from taskdesk.boundary.db.connection import (
    get_async_db,
    get_async_engine,
    get_async_session_factory,
    ping_database,
)
from taskdesk.boundary.db.models import (
    ChatMessageModel,
    ChatSessionModel,
    DataTableModel,
    EmbeddingModel,
    MessageRole,
)
from taskdesk.boundary.db.CRUD import (
    BaseCRUD,
    chat_message_crud,
    chat_session_crud,
    data_table_crud,
)

__all__ = [
    # Base classes
    "Base",
    "VectorBase",
    "StringIdMixin",
    "TimestampMixin",
    # Connection
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
    "ping_database",
    # Models
    "ChatSessionModel",
    "ChatMessageModel",
    "MessageRole",
    "DataTableModel",
    "EmbeddingModel",
    # CRUD
    "BaseCRUD",
    "chat_session_crud",
    "chat_message_crud",
    "data_table_crud",
]
