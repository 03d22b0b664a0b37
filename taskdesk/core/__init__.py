"""
Core business logic module.

Contains domain logic with no I/O: text normalization, prompt assembly,
fallback and table answers, answer language enforcement, the exception
hierarchy, capability tracking and per-key locking.
"""

from taskdesk.core.exceptions import (
    ModelUnavailableError,
    PersistenceError,
    RebuildInProgressError,
    RetrievalError,
    SessionNotFoundError,
    TaskDeskException,
    ValidationError,
    VectorStoreError,
)

__all__ = [
    "TaskDeskException",
    "ValidationError",
    "SessionNotFoundError",
    "ModelUnavailableError",
    "VectorStoreError",
    "RebuildInProgressError",
    "PersistenceError",
    "RetrievalError",
]
