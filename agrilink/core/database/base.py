"""
Base database models and utilities.

This module provides the foundational database components used across
all entities in the centralized database layer using SQLModel.
"""

from datetime import datetime, timezone

from pydantic import ConfigDict
from sqlmodel import DateTime, Field, SQLModel


def utc_now() -> datetime:
    """Current UTC time as a naive datetime.

    Every timestamp column stores naive UTC so that comparisons behave the
    same on PostgreSQL and SQLite. The columns are declared with
    ``sa_type=DateTime`` (``timezone=False``), which accepts naive values.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Base(SQLModel):
    """Base class for all SQLModel entities."""

    model_config = ConfigDict(arbitrary_types_allowed=True)


class TimestampedBase(Base):
    """Adds ``created_at``/``updated_at`` columns.

    ``updated_at`` is bumped by the repositories on update rather than by a
    column ``onupdate`` hook, so no attribute is expired behind an async session.
    """

    created_at: datetime = Field(default_factory=utc_now, description="Row creation time (UTC)", sa_type=DateTime)
    updated_at: datetime = Field(default_factory=utc_now, description="Last modification time (UTC)", sa_type=DateTime)


def as_naive_utc(value: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive values are assumed to be UTC already."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
