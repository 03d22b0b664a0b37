"""
Exception hierarchy for the TaskDesk chat backend.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class TaskDeskException(Exception):
    """Base exception for all TaskDesk application errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(TaskDeskException):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class SessionNotFoundError(TaskDeskException):
    """Raised when a chat session cannot be found."""

    def __init__(self, session_id: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize session not found error.

        Args:
            session_id: ID of the missing session
            details: Additional context
        """
        details = details or {}
        details["session_id"] = session_id
        super().__init__(f"Session not found: {session_id}", details)


class ModelUnavailableError(TaskDeskException):
    """Raised when the language model cannot produce a completion."""

    def __init__(
        self,
        message: str,
        provider: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize model unavailable error.

        Args:
            message: Error message
            provider: Model provider that failed
            details: Additional context
        """
        details = details or {}
        if provider:
            details["provider"] = provider
        super().__init__(message, details)


class VectorStoreError(TaskDeskException):
    """Raised when vector store operations fail."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize vector store error.

        Args:
            message: Error message
            operation: Operation that failed (rebuild, insert, query)
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details)


class RebuildInProgressError(VectorStoreError):
    """Raised when an embeddings rebuild is requested while another one runs."""

    def __init__(self) -> None:
        super().__init__("Embeddings rebuild already in progress", operation="rebuild")


class PersistenceError(TaskDeskException):
    """Raised when chat turns cannot be written to the relational store."""

    def __init__(
        self,
        message: str,
        session_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if session_id:
            details["session_id"] = session_id
        super().__init__(message, details)


class RetrievalError(TaskDeskException):
    """Raised when retrieval operations fail."""

    def __init__(
        self,
        message: str,
        stage: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize retrieval error.

        Args:
            message: Error message
            stage: Retrieval stage that failed (keyword, table, vector, web)
            details: Additional context
        """
        details = details or {}
        if stage:
            details["stage"] = stage
        super().__init__(message, details)
