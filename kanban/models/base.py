"""
Base configurations and mixins for database models.

Provides the declarative base shared by every model plus the id and timestamp
columns that all kanban tables carry.
"""

from sqlalchemy import Column, DateTime, Integer
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql.functions import now as db_now

Base = declarative_base()


class IntegerIDMixin:
    """Auto-incrementing integer primary key."""

    id = Column(
        Integer,
        primary_key=True,
        autoincrement=True,
        comment="Primary key",
    )


class CreatedAtMixin:
    """Insert timestamp managed by the database."""

    created_at = Column(
        DateTime(timezone=True),
        server_default=db_now(),
        nullable=False,
        comment="Timestamp when the record was created",
    )


class TimestampMixin(CreatedAtMixin):
    """
    Adds ``updated_at`` on top of ``created_at``.

    ``updated_at`` is refreshed by SQLAlchemy on every UPDATE issued through the
    ORM; handlers that change only related rows bump it explicitly.
    """

    updated_at = Column(
        DateTime(timezone=True),
        server_default=db_now(),
        onupdate=db_now(),
        nullable=False,
        comment="Timestamp when the record was last updated",
    )


__all__ = ["Base", "IntegerIDMixin", "CreatedAtMixin", "TimestampMixin"]
