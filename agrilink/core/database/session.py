"""
Global database session and engine management.

This module manages the global AsyncEngine and async_sessionmaker instances
that are used throughout the application for database access.
"""

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.server.core.config import settings

from .utils import create_all, create_engine, create_sessionmaker

engine = create_engine(settings.database_url, echo=settings.database_echo)
async_session_maker = create_sessionmaker(engine)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency generator for database sessions.

    Yields:
        AsyncSession: An asynchronous SQLAlchemy session.
    """
    async with async_session_maker() as session:
        yield session


async def init_db() -> None:
    """
    Initialize the database for local development.

    SQLite databases get their tables created from the ORM metadata.
    PostgreSQL deployments are migrated by Alembic before the server starts,
    so nothing is done for them here.
    """
    if engine.url.get_backend_name() == "sqlite":
        await create_all(engine)
