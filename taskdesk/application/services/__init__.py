"""Service orchestrators."""

from .chat_service import ChatService
from .embedding_service import EmbeddingService
from .health_service import HealthService
from .retrieval_service import RetrievalService
from .session_service import SessionService
from .table_answer_service import TableAnswerService

__all__ = [
    "ChatService",
    "EmbeddingService",
    "HealthService",
    "RetrievalService",
    "SessionService",
    "TableAnswerService",
]
