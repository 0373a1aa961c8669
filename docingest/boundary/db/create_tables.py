"""
Database table creation script.

Creates all tables defined in ORM models using SQLAlchemy metadata.
Schema migrations are managed outside this service; this is a
development convenience.

Dependencies: sqlalchemy, docingest.configs
System role: Database schema initialization

Usage:
    python -m docingest.boundary.db.create_tables
"""

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncEngine

from docingest.boundary.db.base import Base
from docingest.boundary.db.connection import get_async_engine

# Import all models to register them with Base.metadata
from docingest.boundary.db.models import AttemptLogModel, DocumentModel  # noqa: F401

logger = logging.getLogger(__name__)


async def create_all_tables(engine: AsyncEngine | None = None) -> None:
    """
    Create all database tables from registered ORM models.

    Idempotent: existing tables remain unchanged.

    Args:
        engine: Engine to use (defaults to the configured application engine)
    """
    engine = engine or get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("create_all_tables - tables created")


async def drop_all_tables(engine: AsyncEngine | None = None) -> None:
    """Drop all database tables and their data."""
    engine = engine or get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    logger.info("drop_all_tables - tables dropped")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(create_all_tables())
