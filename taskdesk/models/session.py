"""
Session domain models and schemas.

Read models for chat sessions and their messages.

Dependencies: pydantic
System role: Session API contracts
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SessionSummary(BaseModel):
    """Session list entry with the latest message as a preview."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    updated_at: datetime = Field(alias="updatedAt")
    last_message: str = Field(default="", alias="lastMessage")


class ChatMessageView(BaseModel):
    """
    Persisted chat message as served to callers and kept in the cache.

    Serialized with camelCase aliases so cached entries and API payloads share
    one shape.
    """

    model_config = ConfigDict(populate_by_name=True)

    role: str
    content: str
    created_at: datetime = Field(alias="createdAt")
    metadata: dict[str, Any] | None = None
