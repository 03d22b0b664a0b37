"""
Database models package.

Exports:
  - ChatSessionModel, ChatMessageModel, MessageRole: Chat persistence
  - NoteModel, CategoryModel, GuideModel, TaskModel, TemplateModel,
    FavoriteModel, DataTableModel: Collaborator content read models
  - EmbeddingModel: pgvector-backed chunk embeddings (VectorBase metadata)

Dependencies: sqlalchemy, pgvector, taskdesk.boundary.db.base
System role: Database model definitions for domain entities
"""

from taskdesk.boundary.db.models.chat_message_model import ChatMessageModel, MessageRole
from taskdesk.boundary.db.models.chat_session_model import ChatSessionModel
from taskdesk.boundary.db.models.content_models import (
    CategoryModel,
    DataTableModel,
    FavoriteModel,
    GuideModel,
    NoteModel,
    TaskModel,
    TemplateModel,
)
from taskdesk.boundary.db.models.embedding_model import EmbeddingModel

__all__ = [
    "ChatSessionModel",
    "ChatMessageModel",
    "MessageRole",
    "NoteModel",
    "CategoryModel",
    "GuideModel",
    "TaskModel",
    "TemplateModel",
    "FavoriteModel",
    "DataTableModel",
    "EmbeddingModel",
]
