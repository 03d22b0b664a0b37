"""
Table answer service.

Answers questions that mention a table straight from the stored grid,
without calling the language model.

Dependencies: taskdesk.boundary.db.CRUD, taskdesk.core.bot.table_answers
System role: Deterministic answers for table questions
"""

import logging
from collections.abc import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from taskdesk.boundary.db.CRUD.content_crud import data_table_crud
from taskdesk.boundary.db.models.content_models import DataTableModel
from taskdesk.core.bot.table_answers import (
    describe_table,
    detect_max_score,
    is_max_question,
    is_table_question,
)

logger = logging.getLogger(__name__)

CANDIDATE_TABLES = 5
EXAMPLE_NAME_MARKERS = ("דוגמא", "example")


def pick_table(tables: Sequence[DataTableModel], question: str) -> DataTableModel | None:
    """
    Choose the table a question most likely refers to.

    Preference: a name containing an example marker, then a name containing
    the whole question, else the most recent table.
    """
    if not tables:
        return None
    for marker in EXAMPLE_NAME_MARKERS:
        for table in tables:
            if marker in (table.name or "").lower():
                return table
    lowered = question.lower()
    for table in tables:
        if lowered in (table.name or "").lower():
            return table
    return tables[0]


class TableAnswerService:
    """Answers table questions from stored data tables."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def answer(self, question: str) -> str | None:
        """
        Answer a table question directly.

        Args:
            question: Normalized user question

        Returns:
            str | None: Answer text, None when the question is not about a
            table or no table exists
        """
        if not is_table_question(question):
            return None

        tables = await data_table_crud.list_recent(self.db, CANDIDATE_TABLES)
        table = pick_table(tables, question)
        if table is None:
            return None

        columns = table.columns or []
        rows = table.rows or []
        if is_max_question(question):
            top = detect_max_score(columns, rows)
            if top:
                logger.info(f"{__name__}:answer - Max score answer from table {table.id}")
                return top

        return describe_table(table.name, columns, rows)
