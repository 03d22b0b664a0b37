"""
Chat domain models and schemas.

Request/response schemas for chat operations.

Dependencies: pydantic
System role: Chat API contracts
"""

from pydantic import BaseModel, ConfigDict, Field

from taskdesk.core.bot.bot_schema import ContextChunk, WebResult


class ChatRequest(BaseModel):
    """Request schema for chat messages."""

    model_config = ConfigDict(populate_by_name=True)

    question: str | None = Field(default=None, description="User question")
    session_id: str | None = Field(
        default=None,
        alias="sessionId",
        description="Existing session to continue; a new one is created when omitted",
    )


class ChatResponse(BaseModel):
    """Response schema for chat messages."""

    model_config = ConfigDict(populate_by_name=True)

    answer: str
    session_id: str = Field(alias="sessionId")
    context: list[ContextChunk]
    web_results: list[WebResult] = Field(alias="webResults")

