"""
Database table creation script.

Creates the relational tables defined in ORM models using SQLAlchemy
metadata. The embeddings table lives on VectorBase and is created by the
vector store once the extension is confirmed.

Dependencies: sqlalchemy, taskdesk.configs
System role: Database schema initialization

Usage:
    python -m taskdesk.boundary.db.create_tables
"""

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncEngine

from taskdesk.boundary.db.base import Base
from taskdesk.boundary.db.connection import get_async_engine

# Import all models to register them with Base.metadata
from taskdesk.boundary.db import models  # noqa: F401

logger = logging.getLogger(__name__)


async def create_all_tables(engine: AsyncEngine | None = None) -> None:
    """
    Create all relational tables from registered ORM models.

    Idempotent: issues CREATE TABLE IF NOT EXISTS for each model, so safe
    to run multiple times. Existing tables remain unchanged.

    Args:
        engine: Engine to use, the shared engine when None

    Raises:
        SQLAlchemyError: If database connection fails or table creation fails

    Usage:
        python -m taskdesk.boundary.db.create_tables
        # Or in code:
        await create_all_tables()
    """
    engine = engine or get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"{__name__}:create_all_tables - Relational tables ready")


async def drop_all_tables(engine: AsyncEngine | None = None) -> None:
    """
    Drop all relational tables and their data.

    WARNING: Irreversible data loss. Only use in development environments.

    Raises:
        SQLAlchemyError: If database connection fails or drop fails
    """
    engine = engine or get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    logger.info(f"{__name__}:drop_all_tables - Relational tables dropped")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(create_all_tables())
