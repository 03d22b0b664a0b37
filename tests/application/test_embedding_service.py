"""
Test suite for EmbeddingService.

Collaborator records live in in-memory SQLite; the pgvector store and the
model invoker are mocked.

System role: Verification of embedding rebuilds, search and ad-hoc inserts
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from taskdesk.application.services.embedding_service import (
    EmbeddingService,
    render_sample_rows,
    render_steps,
)
from taskdesk.boundary.db.CRUD.content_crud import (
    data_table_crud,
    favorite_crud,
    guide_crud,
    note_crud,
    task_crud,
    template_crud,
)
from taskdesk.boundary.vdb.pgvector_store import PgVectorStore
from taskdesk.configs.vector_store import VectorStoreSettings
from taskdesk.core.exceptions import RebuildInProgressError, VectorStoreError
from taskdesk.models.embedding import EmbeddingHit
from taskdesk.models.table import TableData


@pytest.fixture
def mock_store() -> MagicMock:
    """Provide vector store mock that is ready and counts inserted records."""
    store = MagicMock(spec=PgVectorStore)
    store.ensure_ready = AsyncMock(return_value=True)
    store.replace_all = AsyncMock(side_effect=lambda records: len(records))
    store.add = AsyncMock(return_value=1)
    store.nearest = AsyncMock(return_value=[])
    return store


@pytest.fixture
def embedding_service(
    test_async_db: AsyncSession,
    mock_store: MagicMock,
    mock_invoker: MagicMock,
) -> EmbeddingService:
    """Provide EmbeddingService with a fresh rebuild lock."""
    return EmbeddingService(
        db=test_async_db,
        store=mock_store,
        invoker=mock_invoker,
        rebuild_lock=asyncio.Lock(),
        config=VectorStoreSettings(chunk_size=700, chunk_overlap=80, search_limit=3),
    )


async def seed_content(db: AsyncSession) -> None:
    await note_crud.create(db, title="פתק", content="<p>תוכן הפתק</p>")
    await guide_crud.create(db, title="מדריך", content="הסבר")
    await favorite_crud.create(db, title="אתר", link="https://a.test", content="תיאור")
    await task_crud.create(db, title="משימה", content="", steps=[{"title": "צעד", "link": "https://b.test"}])
    await template_crud.create(db, name="תבנית", steps=[{"title": "צעד ראשון"}])
    await data_table_crud.create_table(
        db, TableData(name="ציונים", columns=["שם", "ציון"], rows=[["דנה", 90]])
    )


class TestRenderHelpers:
    """Test suite for payload rendering helpers."""

    def test_render_steps_should_number_steps_with_links(self) -> None:
        """Test steps render as numbered lines."""
        steps = [{"title": "להוריד", "link": "https://a.test"}, {"title": "להריץ"}, "garbage"]

        assert render_steps(steps) == "1. להוריד (https://a.test)\n2. להריץ\n3. "

    def test_render_sample_rows_should_limit_rows(self) -> None:
        """Test only the first rows are rendered."""
        assert render_sample_rows([["א", 1], ["ב", None], ["ג", 3]], 2) == "1. א | 1\n2. ב | "


class TestCollectSources:
    """Test suite for EmbeddingService.collect_sources."""

    @pytest.mark.asyncio
    async def test_collect_sources_should_cover_every_record_type(
        self, embedding_service: EmbeddingService, test_async_db: AsyncSession
    ) -> None:
        """Test one payload per collaborator record."""
        # Arrange
        await seed_content(test_async_db)

        # Act
        payloads = await embedding_service.collect_sources()

        # Assert
        by_type = {payload.entity_type: payload.content for payload in payloads}
        assert set(by_type) == {"note", "guide", "favorite", "task", "template", "table"}
        assert by_type["note"] == "פתק\nתוכן הפתק"
        assert "קטגוריה: כללי" in by_type["guide"]
        assert "שלבים: 1. צעד (https://b.test)" in by_type["task"]
        assert by_type["table"] == "ציונים\nעמודות: שם, ציון\nדגימה:\n1. דנה | 90"


class TestRebuildAll:
    """Test suite for EmbeddingService.rebuild_all."""

    @pytest.mark.asyncio
    async def test_rebuild_all_should_replace_with_embedded_chunks(
        self, embedding_service, test_async_db, mock_store
    ) -> None:
        """Test every chunk is embedded and swapped in at once."""
        # Arrange
        await seed_content(test_async_db)

        # Act
        report = await embedding_service.rebuild_all()

        # Assert
        assert report.sources == 6
        assert report.chunks == 6
        assert report.inserted == 6
        assert report.skipped == 0
        records = mock_store.replace_all.await_args.args[0]
        assert {record.entity_type for record in records} == {
            "note", "guide", "favorite", "task", "template", "table"
        }
        assert all(record.embedding == [0.1, 0.2, 0.3] for record in records)

    @pytest.mark.asyncio
    async def test_rebuild_all_should_be_idempotent(
        self, embedding_service, test_async_db, mock_store
    ) -> None:
        """Test repeated rebuilds produce the same set."""
        # Arrange
        await seed_content(test_async_db)

        # Act
        first = await embedding_service.rebuild_all()
        second = await embedding_service.rebuild_all()

        # Assert
        assert first == second
        calls = mock_store.replace_all.await_args_list
        assert [len(call.args[0]) for call in calls] == [6, 6]

    @pytest.mark.asyncio
    async def test_rebuild_all_should_skip_empty_embeddings(
        self, embedding_service, test_async_db, mock_invoker
    ) -> None:
        """Test chunks the model cannot embed are skipped."""
        # Arrange
        await note_crud.create(test_async_db, title="א", content="תוכן")
        await note_crud.create(test_async_db, title="ב", content="תוכן")
        mock_invoker.embed.side_effect = [[0.1], []]

        # Act
        report = await embedding_service.rebuild_all()

        # Assert
        assert report.chunks == 2
        assert report.inserted == 1
        assert report.skipped == 1

    @pytest.mark.asyncio
    async def test_rebuild_all_should_chunk_long_content(
        self, embedding_service, test_async_db
    ) -> None:
        """Test long records produce overlapping chunks."""
        await note_crud.create(test_async_db, title="ארוך", content="א" * 1500)

        report = await embedding_service.rebuild_all()

        assert report.sources == 1
        assert report.chunks == 3

    @pytest.mark.asyncio
    async def test_rebuild_all_should_reject_concurrent_rebuild(
        self, embedding_service, mock_store
    ) -> None:
        """Test a second rebuild fails fast while one is running."""
        # Arrange
        await embedding_service.rebuild_lock.acquire()

        # Act / Assert
        try:
            with pytest.raises(RebuildInProgressError):
                await embedding_service.rebuild_all()
        finally:
            embedding_service.rebuild_lock.release()
        mock_store.replace_all.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rebuild_all_should_fail_when_store_unavailable(
        self, embedding_service, mock_store
    ) -> None:
        """Test an unavailable backend raises VectorStoreError."""
        mock_store.ensure_ready.return_value = False

        with pytest.raises(VectorStoreError):
            await embedding_service.rebuild_all()
        mock_store.replace_all.assert_not_awaited()


class TestSearchAndAdHoc:
    """Test suite for EmbeddingService.search and add_adhoc."""

    @pytest.mark.asyncio
    async def test_search_should_query_store_with_embedding(
        self, embedding_service, mock_store
    ) -> None:
        """Test search embeds the query and uses the configured limit."""
        # Arrange
        hit = EmbeddingHit(entity_type="note", entity_id="n", content="x", score=1.0)
        mock_store.nearest.return_value = [hit]

        # Act
        hits = await embedding_service.search("שאלה")

        # Assert
        assert hits == [hit]
        mock_store.nearest.assert_awaited_once_with([0.1, 0.2, 0.3], 3)

    @pytest.mark.asyncio
    async def test_search_should_degrade_to_empty(self, embedding_service, mock_store) -> None:
        """Test backend failures yield no hits."""
        mock_store.nearest.side_effect = VectorStoreError("query failed", operation="query")

        assert await embedding_service.search("שאלה") == []

    @pytest.mark.asyncio
    async def test_search_should_skip_when_unavailable(self, embedding_service, mock_store) -> None:
        """Test no query is sent when the backend is unavailable."""
        mock_store.ensure_ready.return_value = False

        assert await embedding_service.search("שאלה") == []
        mock_store.nearest.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_add_adhoc_should_return_generated_id(self, embedding_service, mock_store) -> None:
        """Test ad-hoc text is stored under the adhoc entity type."""
        # Act
        entity_id = await embedding_service.add_adhoc("טקסט חופשי")

        # Assert
        assert len(entity_id) == 32
        record = mock_store.add.await_args.args[0]
        assert record.entity_type == "adhoc"
        assert record.entity_id == entity_id

    @pytest.mark.asyncio
    async def test_add_adhoc_should_return_none_without_embedding(
        self, embedding_service, mock_invoker, mock_store
    ) -> None:
        """Test nothing is stored when the text cannot be embedded."""
        mock_invoker.embed.return_value = []

        assert await embedding_service.add_adhoc("טקסט") is None
        mock_store.add.assert_not_awaited()
