"""
Centralized database layer for AgriLink.

This package provides a unified location for all database entities and repositories,
organized by service domain.

Structure:
- entities/: Database entity models, one module per service domain
- repositories/: Data access layer, one module per service domain
- session.py: Global engine and session factory management
- utils.py: Database utility functions (engine, session factory, create_all)
"""

from .base import Base, TimestampedBase, as_naive_utc, utc_now
from .session import (
    async_session_maker,
    engine,
    get_session,
    init_db,
)
from .utils import (
    create_all,
    create_engine,
    create_sessionmaker,
)

__all__ = [
    "Base",
    "TimestampedBase",
    "as_naive_utc",
    "async_session_maker",
    "create_all",
    "create_engine",
    "create_sessionmaker",
    "engine",
    "get_session",
    "init_db",
    "utc_now",
]
