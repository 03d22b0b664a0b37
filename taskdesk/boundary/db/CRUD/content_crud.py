"""
Collaborator content CRUD operations.

Read queries over notes, guides, tasks, templates, favorites and data tables
used by retrieval and embedding rebuilds. Data tables are written only
through the TableData contract so stored rows always match their columns.

Dependencies: sqlalchemy, taskdesk.boundary.db.models, taskdesk.models.table
System role: Retrieval source queries
"""

from typing import Sequence, TypeVar

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskdesk.boundary.db.CRUD.base_crud import BaseCRUD
from taskdesk.boundary.db.models.content_models import (
    CategoryModel,
    DataTableModel,
    FavoriteModel,
    GuideModel,
    NoteModel,
    TaskModel,
    TemplateModel,
)
from taskdesk.models.table import TableData

SearchableT = TypeVar("SearchableT", NoteModel, GuideModel, TaskModel)


class SearchableCRUD(BaseCRUD[SearchableT]):
    """
    CRUD for records with a title and a content body.

    Adds substring search over both fields, newest-updated first.
    """

    async def search(
        self,
        session: AsyncSession,
        term: str,
        limit: int,
    ) -> Sequence[SearchableT]:
        """
        Case-insensitive substring match on title or content.

        Args:
            session: Async database session
            term: Literal substring (LIKE wildcards are escaped)
            limit: Maximum rows

        Returns:
            Sequence of matching rows, most recently updated first
        """
        stmt = (
            select(self.model)
            .where(
                or_(
                    self.model.title.icontains(term, autoescape=True),
                    self.model.content.icontains(term, autoescape=True),
                )
            )
            .order_by(self.model.updated_at.desc())
            .limit(limit)
        )
        result = await session.execute(stmt)
        return result.scalars().all()


class NoteCRUD(SearchableCRUD[NoteModel]):
    """CRUD operations for NoteModel."""

    def __init__(self) -> None:
        super().__init__(NoteModel)


class GuideCRUD(SearchableCRUD[GuideModel]):
    """CRUD operations for GuideModel (category eagerly loaded)."""

    def __init__(self) -> None:
        super().__init__(GuideModel)


class TaskCRUD(SearchableCRUD[TaskModel]):
    """CRUD operations for TaskModel."""

    def __init__(self) -> None:
        super().__init__(TaskModel)


class CategoryCRUD(BaseCRUD[CategoryModel]):
    """CRUD operations for CategoryModel."""

    def __init__(self) -> None:
        super().__init__(CategoryModel)


class TemplateCRUD(BaseCRUD[TemplateModel]):
    """CRUD operations for TemplateModel."""

    def __init__(self) -> None:
        super().__init__(TemplateModel)


class FavoriteCRUD(BaseCRUD[FavoriteModel]):
    """CRUD operations for FavoriteModel."""

    def __init__(self) -> None:
        super().__init__(FavoriteModel)


class DataTableCRUD(BaseCRUD[DataTableModel]):
    """
    CRUD operations for DataTableModel.

    Writes go through create_table so every stored row has exactly one cell
    per column.
    """

    def __init__(self) -> None:
        super().__init__(DataTableModel)

    async def create_table(self, session: AsyncSession, table: TableData) -> DataTableModel:
        """
        Persist a validated data table.

        Args:
            session: Async database session
            table: Grid already aligned by the TableData validator

        Returns:
            DataTableModel: Flushed row
        """
        return await self.create(
            session,
            name=table.name,
            columns=list(table.columns),
            rows=[list(row) for row in table.rows],
        )

    async def list_recent(
        self,
        session: AsyncSession,
        limit: int,
    ) -> Sequence[DataTableModel]:
        """Most recently updated tables first."""
        stmt = select(DataTableModel).order_by(DataTableModel.updated_at.desc()).limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()


note_crud = NoteCRUD()
guide_crud = GuideCRUD()
task_crud = TaskCRUD()
category_crud = CategoryCRUD()
template_crud = TemplateCRUD()
favorite_crud = FavoriteCRUD()
data_table_crud = DataTableCRUD()
