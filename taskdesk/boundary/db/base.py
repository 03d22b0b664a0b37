"""
SQLAlchemy declarative bases and common mixins.

Provides base classes for all ORM models and reusable mixins for common
fields (string ids, timestamps). Embeddings live on a separate metadata so
relational tables can be created without the vector extension.

Dependencies: sqlalchemy
System role: Foundation for all database models
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


def new_id() -> str:
    """Opaque string identifier for new rows."""
    return uuid.uuid4().hex


class Base(DeclarativeBase):
    """
    SQLAlchemy declarative base for relational ORM models.

    All relational models inherit from this class to ensure they're
    registered with the metadata and included in table creation.
    """

    pass


class VectorBase(DeclarativeBase):
    """
    Declarative base for pgvector-backed tables.

    Kept apart from Base so its tables are only created after the vector
    extension has been confirmed.
    """

    pass


class StringIdMixin:
    """
    Mixin providing an opaque string primary key.

    Attributes:
        id: 32-char hex id generated on insert unless supplied
    """

    id: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
        default=new_id,
        nullable=False,
    )


class TimestampMixin:
    """
    Mixin providing automatic timestamp tracking to all models.

    created_at is set once on row creation and never changes.
    updated_at is refreshed on every update via onupdate hook.
    Both use UTC timezone for consistency across deployments.

    Attributes:
        created_at: Row creation timestamp (UTC, immutable)
        updated_at: Last modification timestamp (UTC, auto-updated)
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )
