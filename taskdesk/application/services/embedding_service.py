"""
Embedding service.

Rebuilds the embedding set from every collaborator record, embeds ad-hoc
text, and runs similarity searches for retrieval. Rebuilds are serialized
process-wide; searches degrade to an empty result when the vector backend
is unavailable.

Dependencies: taskdesk.boundary.vdb, taskdesk.boundary.llm, taskdesk.boundary.db.CRUD
System role: Embedding use case orchestration
"""

import asyncio
import logging
import uuid
from collections.abc import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from taskdesk.boundary.db.CRUD.content_crud import (
    data_table_crud,
    favorite_crud,
    guide_crud,
    note_crud,
    task_crud,
    template_crud,
)
from taskdesk.boundary.llm.model_invoker import ModelInvoker
from taskdesk.boundary.vdb.pgvector_store import PgVectorStore
from taskdesk.configs.vector_store import VectorStoreSettings
from taskdesk.core.exceptions import RebuildInProgressError, VectorStoreError
from taskdesk.core.text_normalizer import chunk_text, strip_markup
from taskdesk.models.embedding import EmbeddingHit, EmbeddingRecordIn, RebuildReport, SourcePayload

logger = logging.getLogger(__name__)

ADHOC_ENTITY = "adhoc"


def render_steps(steps: Sequence | None) -> str:
    """Numbered step lines, with the link in parentheses when present."""
    lines = []
    for idx, step in enumerate(steps or [], start=1):
        step = step if isinstance(step, dict) else {}
        title = step.get("title") or ""
        link = f" ({step['link']})" if step.get("link") else ""
        lines.append(f"{idx}. {title}{link}")
    return "\n".join(lines)


def render_sample_rows(rows: Sequence | None, limit: int) -> str:
    lines = []
    for idx, row in enumerate((rows or [])[:limit], start=1):
        cells = row if isinstance(row, list) else []
        lines.append(f"{idx}. " + " | ".join("" if cell is None else str(cell) for cell in cells))
    return "\n".join(lines)


class EmbeddingService:
    """
    Embedding use cases.

    Attributes:
        db: Request-scoped session used to read collaborator records
        store: pgvector store
        invoker: Model invoker used for embeddings
        rebuild_lock: Process-wide lock serializing rebuilds
        config: Chunking and search settings
    """

    def __init__(
        self,
        db: AsyncSession,
        store: PgVectorStore,
        invoker: ModelInvoker,
        rebuild_lock: asyncio.Lock,
        config: VectorStoreSettings | None = None,
    ) -> None:
        self.db = db
        self.store = store
        self.invoker = invoker
        self.rebuild_lock = rebuild_lock
        self.config = config or VectorStoreSettings()

    async def collect_sources(self) -> list[SourcePayload]:
        """
        Build one text payload per collaborator record.

        Returns:
            list[SourcePayload]: Notes, guides, favorites, tasks, templates, tables
        """
        payloads: list[SourcePayload] = []

        for note in await note_crud.get_all(self.db):
            payloads.append(
                SourcePayload(
                    entity_type="note",
                    entity_id=note.id,
                    content=f"{note.title or 'פתק'}\n{strip_markup(note.content)}",
                )
            )

        for guide in await guide_crud.get_all(self.db):
            category = guide.category.name if guide.category else "כללי"
            payloads.append(
                SourcePayload(
                    entity_type="guide",
                    entity_id=guide.id,
                    content=(
                        f"{guide.title or 'מדריך'}\nקטגוריה: {category}\n"
                        f"{strip_markup(guide.content)}"
                    ),
                )
            )

        for favorite in await favorite_crud.get_all(self.db):
            payloads.append(
                SourcePayload(
                    entity_type="favorite",
                    entity_id=favorite.id,
                    content=(
                        f"{favorite.title or 'מועדף'}\n{favorite.link or ''}\n"
                        f"{strip_markup(favorite.content)}"
                    ),
                )
            )

        for task in await task_crud.get_all(self.db):
            payloads.append(
                SourcePayload(
                    entity_type="task",
                    entity_id=task.id,
                    content=(
                        f"{task.title}\n{strip_markup(task.content)}\n"
                        f"שלבים: {render_steps(task.steps)}"
                    ),
                )
            )

        for template in await template_crud.get_all(self.db):
            payloads.append(
                SourcePayload(
                    entity_type="template",
                    entity_id=template.id,
                    content=f"{template.name}\nשלבים מומלצים:\n{render_steps(template.steps)}",
                )
            )

        for table in await data_table_crud.get_all(self.db):
            columns = ", ".join(str(column) for column in table.columns or [])
            sample = render_sample_rows(table.rows, self.config.table_sample_rows)
            payloads.append(
                SourcePayload(
                    entity_type="table",
                    entity_id=table.id,
                    content=f"{table.name or 'טבלה'}\nעמודות: {columns}\nדגימה:\n{sample}",
                )
            )

        return payloads

    async def rebuild_all(self) -> RebuildReport:
        """
        Replace every stored embedding with fresh ones.

        All chunks are embedded first; the old set is then swapped for the
        new one in a single transaction. Chunks whose embedding comes back
        empty are skipped.

        Returns:
            RebuildReport: Counts of sources, chunks, inserted and skipped rows

        Raises:
            RebuildInProgressError: If another rebuild is running
            VectorStoreError: If the vector backend is unavailable or the swap fails
        """
        if self.rebuild_lock.locked():
            raise RebuildInProgressError()

        async with self.rebuild_lock:
            if not await self.store.ensure_ready():
                raise VectorStoreError("Vector store unavailable", operation="rebuild")

            sources = await self.collect_sources()
            report = RebuildReport(sources=len(sources))
            records: list[EmbeddingRecordIn] = []

            for source in sources:
                for chunk in chunk_text(
                    source.content,
                    self.config.chunk_size,
                    self.config.chunk_overlap,
                ):
                    report.chunks += 1
                    vector = await self.invoker.embed(chunk)
                    if not vector:
                        report.skipped += 1
                        logger.warning(
                            f"{__name__}:rebuild_all - Empty embedding for "
                            f"{source.entity_type}#{source.entity_id}, skipping chunk"
                        )
                        continue
                    records.append(
                        EmbeddingRecordIn(
                            entity_type=source.entity_type,
                            entity_id=source.entity_id,
                            content=chunk,
                            embedding=vector,
                        )
                    )

            report.inserted = await self.store.replace_all(records)
            logger.info(
                f"{__name__}:rebuild_all - sources={report.sources} chunks={report.chunks} "
                f"inserted={report.inserted} skipped={report.skipped}"
            )
            return report

    async def search(self, query: str, limit: int | None = None) -> list[EmbeddingHit]:
        """
        Nearest stored chunks for a query.

        Returns:
            list[EmbeddingHit]: Empty when the backend is unavailable, the
            query cannot be embedded, or the query fails
        """
        if not await self.store.ensure_ready():
            return []
        vector = await self.invoker.embed(query)
        if not vector:
            return []
        try:
            return await self.store.nearest(vector, limit or self.config.search_limit)
        except VectorStoreError as e:
            logger.warning(f"{__name__}:search - {e}")
            return []

    async def add_adhoc(self, content: str) -> str | None:
        """
        Embed free text under the ad-hoc entity type.

        Returns:
            str | None: Generated entity id, None when the backend or the
            embedding is unavailable
        """
        if not await self.store.ensure_ready():
            return None
        vector = await self.invoker.embed(content)
        if not vector:
            return None
        entity_id = uuid.uuid4().hex
        await self.store.add(
            EmbeddingRecordIn(
                entity_type=ADHOC_ENTITY,
                entity_id=entity_id,
                content=content,
                embedding=vector,
            )
        )
        return entity_id
