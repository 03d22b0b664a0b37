"""
Base CRUD operations for SQLAlchemy models.

Generic create, lookup, ordered listing and counting shared by the chat
and collaborator content CRUD classes.

Dependencies: sqlalchemy
System role: Foundation for all database CRUD operations
"""

from typing import Generic, Sequence, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskdesk.boundary.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)
RecordId = str | int


class BaseCRUD(Generic[ModelT]):
    """
    Generic base class for CRUD operations.

    Provides standard database operations that work with any SQLAlchemy model.
    Subclasses should specify the model class and can override or extend
    these methods for model-specific behavior.

    Type Parameters:
        ModelT: SQLAlchemy model class inheriting from Base

    Attributes:
        model: The SQLAlchemy model class to operate on
    """

    def __init__(self, model: type[ModelT]) -> None:
        """
        Initialize CRUD with target model.

        Args:
            model: SQLAlchemy model class for database operations
        """
        self.model = model

    def _stable_order(self) -> tuple:
        created_at = getattr(self.model, "created_at", None)
        if created_at is None:
            return (self.model.id,)
        return (created_at, self.model.id)

    async def create(self, session: AsyncSession, **kwargs) -> ModelT:
        """
        Create a new record in the database.

        Args:
            session: Async database session
            **kwargs: Model field values

        Returns:
            Created model instance with generated ID and timestamps
        """
        instance = self.model(**kwargs)
        session.add(instance)
        await session.flush()
        await session.refresh(instance)
        return instance

    async def get_by_id(self, session: AsyncSession, id: RecordId) -> ModelT | None:
        """
        Retrieve a single record by primary key.

        Args:
            session: Async database session
            id: Primary key

        Returns:
            Model instance if found, None otherwise
        """
        return await session.get(self.model, id)

    async def get_all(
        self,
        session: AsyncSession,
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[ModelT]:
        """
        Retrieve all records in creation order with optional pagination.

        Rows created in the same instant are ordered by primary key, so
        repeated reads (e.g. embedding rebuilds) see a stable sequence.

        Args:
            session: Async database session
            limit: Maximum number of records to return (None for all)
            offset: Number of records to skip

        Returns:
            Sequence of model instances
        """
        stmt = select(self.model).order_by(*self._stable_order()).offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def exists(self, session: AsyncSession, id: RecordId) -> bool:
        """
        Check if a record exists by primary key.

        Args:
            session: Async database session
            id: Primary key

        Returns:
            True if record exists, False otherwise
        """
        stmt = select(self.model.id).where(self.model.id == id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def count(self, session: AsyncSession) -> int:
        """Count all rows of the model's table."""
        result = await session.execute(select(func.count()).select_from(self.model))
        return int(result.scalar_one())
