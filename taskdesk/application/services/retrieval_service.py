"""
Retrieval service.

Fuses keyword matches over notes, guides and tasks, recent data tables,
vector nearest neighbours and (optionally) web search results into one
bounded, deduplicated context for a chat turn, then builds the prompt.

Dependencies: taskdesk.boundary.db.CRUD, taskdesk.application.services.embedding_service,
    taskdesk.boundary.web, taskdesk.core.bot
System role: Hybrid retrieval for the chat pipeline
"""

import asyncio
import logging
from collections.abc import Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from taskdesk.application.services.embedding_service import EmbeddingService
from taskdesk.boundary.db.CRUD.content_crud import data_table_crud, guide_crud, note_crud, task_crud
from taskdesk.boundary.db.models.content_models import DataTableModel
from taskdesk.boundary.web.web_search_client import WebSearchClient
from taskdesk.configs.retrieval import RetrievalSettings
from taskdesk.core.bot.bot_schema import (
    TABLE_SOURCE,
    ContextChunk,
    HistoryTurn,
    RetrievalResult,
    WebResult,
)
from taskdesk.core.bot.prompt_builder import build_prompt
from taskdesk.core.bot.table_answers import DEFAULT_TABLE_NAME, summarize_table
from taskdesk.core.exceptions import RetrievalError
from taskdesk.core.text_normalizer import (
    normalize_whitespace,
    restrict_to_target_script,
    strip_markup,
)

logger = logging.getLogger(__name__)

WEB_CUES = (
    "מה דעתך",
    "מה אתה חושב",
    "איך היית",
    "מומלץ",
    "השוואה",
    "טוב יותר",
    "עדכני",
    "חדש",
)


def should_use_web(question: str) -> bool:
    """Whether the question asks for an opinion or recent information."""
    lowered = (question or "").lower()
    return any(cue in lowered for cue in WEB_CUES)


def question_terms(text: str) -> list[str]:
    """Lowercased whitespace-separated terms longer than one character."""
    return [term for term in (text or "").lower().split() if len(term) > 1]


def table_haystack(table: DataTableModel) -> str:
    columns = " ".join(str(column) for column in table.columns or [])
    rows = " ".join(
        " ".join("" if cell is None else str(cell) for cell in row)
        for row in table.rows or []
        if isinstance(row, list)
    )
    return f"{table.name or ''} {columns} {rows}".lower()


def select_tables(
    tables: Sequence[DataTableModel],
    term: str,
    matched_limit: int = 3,
    fallback_limit: int = 2,
) -> list[DataTableModel]:
    """
    Pick the tables relevant to a question.

    Tables are ranked by the number of distinct question terms found in
    their name, columns or cells; ties keep the incoming (recency) order.
    With no match the most recent tables are used instead.

    Args:
        tables: Candidates, most recently updated first
        term: Question prefix used for matching
        matched_limit: Maximum matched tables
        fallback_limit: Tables used when nothing matches

    Returns:
        list[DataTableModel]
    """
    terms = set(question_terms(term))
    if not terms:
        return list(tables[:matched_limit])

    ranked = []
    for position, table in enumerate(tables):
        haystack = table_haystack(table)
        hits = sum(1 for t in terms if t in haystack)
        if hits:
            ranked.append((-hits, position, table))
    ranked.sort(key=lambda item: (item[0], item[1]))

    if ranked:
        return [table for _, _, table in ranked[:matched_limit]]
    return list(tables[:fallback_limit])


def to_chunk(
    title: str,
    source: str,
    content: str,
    default_title: str = "",
    ref: str = "",
) -> ContextChunk:
    """Context chunk with title and content restricted to the target script."""
    return ContextChunk(
        title=restrict_to_target_script(title) or default_title,
        source=source,
        content=restrict_to_target_script(normalize_whitespace(content)),
        ref=ref,
    )


def dedupe_chunks(chunks: Sequence[ContextChunk], limit: int) -> list[ContextChunk]:
    """
    Keep the first chunk per source record, then cap the list.

    Records are told apart by ref; the displayed title is only part of the
    key, since titles outside the target script collapse to a placeholder.
    """
    seen: set[tuple[str, str, str]] = set()
    unique = []
    for chunk in chunks:
        key = (chunk.title, chunk.source, chunk.ref)
        if key in seen:
            continue
        seen.add(key)
        unique.append(chunk)
    return unique[:limit]


class RetrievalService:
    """
    Hybrid retrieval for one chat turn.

    Attributes:
        db: Request-scoped session for keyword and table stages
        embeddings: Embedding service used for the vector stage
        web_client: Web search client for the optional web stage
        config: Retrieval settings
    """

    def __init__(
        self,
        db: AsyncSession,
        embeddings: EmbeddingService,
        web_client: WebSearchClient,
        config: RetrievalSettings | None = None,
    ) -> None:
        self.db = db
        self.embeddings = embeddings
        self.web_client = web_client
        self.config = config or RetrievalSettings()

    async def internal_context(self, question: str) -> list[ContextChunk]:
        """
        Keyword and table stages, in merge order: tables, notes, guides, tasks.

        Runs sequentially on the request's database session.

        Raises:
            RetrievalError: If the relational store cannot be queried
        """
        term = question[: self.config.query_prefix_length]
        limit = self.config.per_source_limit

        try:
            notes = await note_crud.search(self.db, term, limit)
            guides = await guide_crud.search(self.db, term, limit)
            tasks = await task_crud.search(self.db, term, limit)
            recent_tables = await data_table_crud.list_recent(self.db, self.config.table_candidates)
        except SQLAlchemyError as e:
            logger.error(f"{__name__}:internal_context - {type(e).__name__}: {e}")
            raise RetrievalError(
                "Keyword retrieval failed",
                stage="keyword",
                details={"error": type(e).__name__},
            ) from e

        chunks = []
        for table in select_tables(
            recent_tables,
            term,
            self.config.matched_tables_limit,
            self.config.fallback_tables_limit,
        ):
            summary = summarize_table(
                table.name,
                table.columns or [],
                table.rows or [],
                self.config.table_summary_rows,
            )
            chunks.append(
                to_chunk(
                    table.name or DEFAULT_TABLE_NAME,
                    TABLE_SOURCE,
                    summary,
                    DEFAULT_TABLE_NAME,
                    ref=f"table:{table.id}",
                )
            )

        for note in notes:
            chunks.append(
                to_chunk(note.title, "note", strip_markup(note.content), "פתק", ref=f"note:{note.id}")
            )

        for guide in guides:
            source = f"guide · {guide.category.name}" if guide.category else "guide"
            chunks.append(
                to_chunk(guide.title, source, strip_markup(guide.content), "מדריך", ref=f"guide:{guide.id}")
            )

        for task in tasks:
            steps = " ".join(
                f"{idx}. {(step if isinstance(step, dict) else {}).get('title') or ''}"
                for idx, step in enumerate(task.steps or [], start=1)
            )
            chunks.append(
                to_chunk(
                    task.title,
                    "task",
                    f"{strip_markup(task.content)}\nשלבים: {steps}",
                    "משימה",
                    ref=f"task:{task.id}",
                )
            )

        return chunks

    async def vector_context(self, question: str) -> list[ContextChunk]:
        """Vector stage; empty when the backend or embedding is unavailable."""
        hits = await self.embeddings.search(question, self.embeddings.config.search_limit)
        return [
            to_chunk(
                f"{hit.entity_type}#{hit.entity_id}",
                f"vector · {hit.entity_type}",
                hit.content,
                hit.entity_type,
                ref=f"{hit.entity_type}:{hit.entity_id}",
            )
            for hit in hits
        ]

    async def web_context(self, question: str) -> list[WebResult]:
        """Web stage; runs only when enabled and the question asks for it."""
        if not self.config.web_search_enabled or not should_use_web(question):
            return []
        return await self.web_client.search(question, self.config.web_result_limit)

    async def build_context(
        self,
        question: str,
        history: Sequence[HistoryTurn] = (),
    ) -> RetrievalResult:
        """
        Gather context for a question and build the prompt from it.

        Args:
            question: Normalized user question
            history: Recent turns rendered into the prompt

        Returns:
            RetrievalResult: Merged context (at most max_context_chunks),
            web results and the assembled prompt

        Raises:
            RetrievalError: If the keyword stage fails; the other stages are
            cancelled before the error propagates
        """
        stages = [
            asyncio.create_task(self.internal_context(question)),
            asyncio.create_task(self.vector_context(question)),
            asyncio.create_task(self.web_context(question)),
        ]
        try:
            internal, vector, web_results = await asyncio.gather(*stages)
        except BaseException:
            for stage in stages:
                stage.cancel()
            await asyncio.gather(*stages, return_exceptions=True)
            raise
        context = dedupe_chunks([*internal, *vector], self.config.max_context_chunks)
        logger.info(
            f"{__name__}:build_context - internal={len(internal)} vector={len(vector)} "
            f"web={len(web_results)} context={len(context)}"
        )
        return RetrievalResult(
            context=context,
            web_results=web_results,
            prompt=build_prompt(question, history, context, web_results),
        )
