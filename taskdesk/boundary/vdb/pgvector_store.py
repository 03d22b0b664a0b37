"""
pgvector embedding store.

Stores chunk embeddings in PostgreSQL through the pgvector extension and
answers nearest-neighbour queries by cosine distance. Availability of the
extension is probed once and memoized in the capability registry.

Dependencies: sqlalchemy, pgvector, taskdesk.core.capabilities
System role: Vector store adapter for embedding rebuilds and retrieval
"""

import logging
from typing import Sequence

from sqlalchemy import delete, select, text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from taskdesk.boundary.db.base import VectorBase
from taskdesk.boundary.db.models.embedding_model import EmbeddingModel
from taskdesk.core.capabilities import VECTOR, CapabilityRegistry
from taskdesk.core.exceptions import VectorStoreError
from taskdesk.models.embedding import EmbeddingHit, EmbeddingRecordIn

logger = logging.getLogger(__name__)


def distance_to_score(distance: float | None) -> float:
    """
    Map cosine distance in [0, 2] to a similarity score in [0, 1].

    Args:
        distance: Cosine distance reported by pgvector

    Returns:
        float: 1 - distance/2 clamped to [0, 1]; 0 for a missing distance
    """
    if distance is None:
        return 0.0
    return max(0.0, min(1.0, 1.0 - float(distance) / 2.0))


class PgVectorStore:
    """
    Embedding store backed by the `embeddings` table.

    Attributes:
        session_factory: Async session factory bound to the PostgreSQL engine
        capabilities: Registry memoizing whether the extension is usable
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        capabilities: CapabilityRegistry,
    ) -> None:
        self.session_factory = session_factory
        self.capabilities = capabilities

    async def _probe(self) -> bool:
        """Create the extension and the embeddings table if missing."""
        async with self.session_factory() as session:
            async with session.begin():
                await session.execute(text("CREATE EXTENSION IF NOT EXISTS vector"))
                conn = await session.connection()
                await conn.run_sync(VectorBase.metadata.create_all)
        logger.info(f"{__name__}:_probe - Vector extension and embeddings table ready")
        return True

    async def ensure_ready(self) -> bool:
        """
        Check that the vector backend is usable, probing at most once.

        Returns:
            bool: True when embeddings can be stored and queried
        """
        return await self.capabilities.ensure(VECTOR, self._probe)

    async def replace_all(self, records: Sequence[EmbeddingRecordIn]) -> int:
        """
        Swap the entire embedding set in one transaction.

        Readers see either the previous set or the new one.

        Args:
            records: New rows to insert after clearing the table

        Returns:
            int: Number of rows inserted

        Raises:
            VectorStoreError: If the transaction fails (nothing is changed)
        """
        try:
            async with self.session_factory() as session:
                async with session.begin():
                    await session.execute(delete(EmbeddingModel))
                    session.add_all(
                        EmbeddingModel(
                            entity_type=record.entity_type,
                            entity_id=record.entity_id,
                            content=record.content,
                            embedding=record.embedding,
                        )
                        for record in records
                    )
        except Exception as e:
            logger.error(f"{__name__}:replace_all - {type(e).__name__}: {e}")
            raise VectorStoreError(
                "Failed to replace embeddings",
                operation="replace_all",
                details={"error": type(e).__name__},
            ) from e

        logger.info(f"{__name__}:replace_all - Stored {len(records)} embeddings")
        return len(records)

    async def add(self, record: EmbeddingRecordIn) -> int:
        """
        Insert a single embedding row.

        Returns:
            int: Generated row id

        Raises:
            VectorStoreError: If the insert fails
        """
        try:
            async with self.session_factory() as session:
                async with session.begin():
                    row = EmbeddingModel(
                        entity_type=record.entity_type,
                        entity_id=record.entity_id,
                        content=record.content,
                        embedding=record.embedding,
                    )
                    session.add(row)
                    await session.flush()
                    row_id = row.id
        except Exception as e:
            logger.error(f"{__name__}:add - {type(e).__name__}: {e}")
            raise VectorStoreError(
                "Failed to insert embedding",
                operation="insert",
                details={"error": type(e).__name__},
            ) from e
        return row_id

    async def nearest(self, vector: list[float], limit: int) -> list[EmbeddingHit]:
        """
        Rows closest to the query vector by cosine distance.

        Args:
            vector: Query embedding
            limit: Maximum hits

        Returns:
            list[EmbeddingHit]: Ascending distance, score = clamp(1 - d/2)

        Raises:
            VectorStoreError: If the query fails
        """
        distance = EmbeddingModel.embedding.cosine_distance(vector).label("distance")
        stmt = (
            select(
                EmbeddingModel.entity_type,
                EmbeddingModel.entity_id,
                EmbeddingModel.content,
                distance,
            )
            .order_by(distance)
            .limit(limit)
        )
        try:
            async with self.session_factory() as session:
                result = await session.execute(stmt)
                rows = result.all()
        except Exception as e:
            logger.error(f"{__name__}:nearest - {type(e).__name__}: {e}")
            raise VectorStoreError(
                "Vector similarity query failed",
                operation="query",
                details={"error": type(e).__name__},
            ) from e

        return [
            EmbeddingHit(
                entity_type=row.entity_type,
                entity_id=row.entity_id,
                content=row.content,
                score=distance_to_score(row.distance),
            )
            for row in rows
        ]
