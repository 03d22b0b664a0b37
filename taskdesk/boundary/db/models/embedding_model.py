"""
Embedding ORM model.

One embedded content chunk tagged with its source entity. The vector column
has no fixed dimension; every row written by one embedding model shares its
length.

Dependencies: sqlalchemy, pgvector, taskdesk.boundary.db.base
System role: Vector persistence for nearest-neighbour retrieval
"""

from datetime import datetime

from pgvector.sqlalchemy import Vector
from sqlalchemy import DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from taskdesk.boundary.db.base import VectorBase, utcnow


class EmbeddingModel(VectorBase):
    """
    Embedding ORM model.

    Attributes:
        id: Autoincrement primary key
        entity_type: Source kind (note, guide, favorite, task, template, table, adhoc)
        entity_id: Id in the source collaborator's id space (not a foreign key)
        content: Exact chunk text that was embedded
        embedding: Float vector
        created_at: Insert timestamp (UTC)
    """

    __tablename__ = "embeddings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    entity_type: Mapped[str] = mapped_column(String(32), nullable=False)
    entity_id: Mapped[str] = mapped_column(String(64), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    embedding = mapped_column(Vector(), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )

    __table_args__ = (
        Index("embeddings_entity_idx", "entity_type", "entity_id"),
        Index("embeddings_created_idx", "created_at"),
    )
