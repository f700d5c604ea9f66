"""
User model for authentication and task ownership.

Users are created out of band (``python -m kanban.db seed-admin``); the API only
reads them, to check credentials and to resolve the identity behind a token.

Architecture:
    User → Task → TaskTeam ← Team
"""

from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from kanban.models.base import Base, IntegerIDMixin, TimestampMixin


class User(Base, IntegerIDMixin, TimestampMixin):
    """
    Account that can log in and create tasks.

    The password is only ever stored as a bcrypt hash.
    """

    __tablename__ = "users"

    username = Column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
        comment="Unique username used to log in",
    )

    password_hash = Column(
        String(255),
        nullable=False,
        comment="Bcrypt hash of the user's password",
    )

    name = Column(
        String(255),
        nullable=False,
        comment="Display name",
    )

    tasks = relationship(
        "Task",
        back_populates="creator",
        cascade="all, delete-orphan",
        passive_deletes=True,
        doc="Tasks created by this user",
    )

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}')>"
