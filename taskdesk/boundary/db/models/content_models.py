"""
Collaborator content ORM models.

Notes, guides and categories, tasks, templates, favorites and data tables
are owned by the task-management CRUD surface; the chat backend only reads
them for retrieval and embedding. Steps, columns and rows are JSON documents.

Dependencies: sqlalchemy, taskdesk.boundary.db.base
System role: Read models for retrieval sources
"""

from sqlalchemy import JSON, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from taskdesk.boundary.db.base import Base, StringIdMixin, TimestampMixin


class NoteModel(Base, StringIdMixin, TimestampMixin):
    """Free-form note with HTML content."""

    __tablename__ = "notes"

    title: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")


class CategoryModel(Base, StringIdMixin, TimestampMixin):
    """Guide category."""

    __tablename__ = "categories"

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    guides = relationship("GuideModel", back_populates="category")


class GuideModel(Base, StringIdMixin, TimestampMixin):
    """How-to guide, optionally filed under a category."""

    __tablename__ = "guides"

    title: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    category_id: Mapped[str | None] = mapped_column(
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
        default=None,
    )

    category = relationship("CategoryModel", back_populates="guides", lazy="selectin")


class TaskModel(Base, StringIdMixin, TimestampMixin):
    """Task with an ordered list of steps ({title, link?, completed?})."""

    __tablename__ = "tasks"

    title: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    steps: Mapped[list] = mapped_column(JSON, nullable=False, default=list)


class TemplateModel(Base, StringIdMixin, TimestampMixin):
    """Reusable task template: a name and recommended steps."""

    __tablename__ = "templates"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    steps: Mapped[list] = mapped_column(JSON, nullable=False, default=list)


class FavoriteModel(Base, StringIdMixin, TimestampMixin):
    """Bookmarked link with a description."""

    __tablename__ = "favorites"

    title: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    link: Mapped[str] = mapped_column(String(2048), nullable=False, default="")
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")


class DataTableModel(Base, StringIdMixin, TimestampMixin):
    """User data table; rows are aligned to columns when written."""

    __tablename__ = "data_tables"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    columns: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    rows: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
