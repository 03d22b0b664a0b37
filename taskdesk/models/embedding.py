"""
Embedding domain models.

Records written to and hits read from the vector store, plus rebuild
reporting.

Dependencies: pydantic
System role: Embedding store contracts
"""

from pydantic import BaseModel, ConfigDict, Field


class SourcePayload(BaseModel):
    """Text collected from one collaborator record before chunking."""

    entity_type: str
    entity_id: str
    content: str


class EmbeddingRecordIn(BaseModel):
    """Chunk plus vector ready for insertion."""

    entity_type: str
    entity_id: str
    content: str
    embedding: list[float]


class EmbeddingHit(BaseModel):
    """Nearest-neighbour result; score in [0, 1], higher is closer."""

    entity_type: str
    entity_id: str
    content: str
    score: float = Field(ge=0.0, le=1.0)


class RebuildReport(BaseModel):
    """Counts from a full embeddings rebuild."""

    sources: int = 0
    chunks: int = 0
    inserted: int = 0
    skipped: int = 0


class RebuildResponse(BaseModel):
    """Response schema for a completed rebuild."""

    ok: bool = True
    report: RebuildReport | None = None


class AdHocEmbeddingRequest(BaseModel):
    """Request schema for embedding free text."""

    content: str = Field(min_length=1)


class AdHocEmbeddingResponse(BaseModel):
    """Response schema for an ad-hoc embedding."""

    model_config = ConfigDict(populate_by_name=True)

    entity_id: str = Field(alias="entityId")
