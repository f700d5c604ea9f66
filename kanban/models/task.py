"""
Task model: a card on the kanban board.

Each task is owned by the user who created it, sits in exactly one status
column and can be tagged with any number of teams.

Architecture:
    User → Task → TaskTeam ← Team
                → TaskAttachment

Lifecycle:
    TO_DO → DOING → DONE (any transition is allowed, the board is free-form)
"""

import enum

from sqlalchemy import CheckConstraint, Column, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from kanban.models.base import Base, IntegerIDMixin, TimestampMixin


class TaskStatus(str, enum.Enum):
    TO_DO = "TO_DO"
    DOING = "DOING"
    DONE = "DONE"

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]


class Task(Base, IntegerIDMixin, TimestampMixin):
    """
    Kanban card created by an authenticated user.

    ``status`` is stored as plain text and guarded by a CHECK constraint so the
    database rejects anything outside ``TaskStatus`` even if a caller bypasses
    request validation.
    """

    __tablename__ = "tasks"
    __table_args__ = (
        CheckConstraint(
            "status IN ('TO_DO', 'DOING', 'DONE')", name="ck_tasks_status"
        ),
        Index("ix_tasks_created_by", "created_by"),
        Index("ix_tasks_status", "status"),
        Index("ix_tasks_created_at", "created_at"),
    )

    name = Column(
        String(255),
        nullable=False,
        comment="Short task title",
    )

    description = Column(
        Text,
        nullable=True,
        comment="Free-form task description",
    )

    status = Column(
        String(20),
        nullable=False,
        default=TaskStatus.TO_DO.value,
        comment="Board column: TO_DO, DOING or DONE",
    )

    external_link = Column(
        Text,
        nullable=True,
        comment="Link to an external document (Google Docs/Forms, Figma, ...)",
    )

    created_by = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        comment="User who created the task",
    )

    creator = relationship(
        "User",
        back_populates="tasks",
        doc="User who created this task",
    )

    team_associations = relationship(
        "TaskTeam",
        back_populates="task",
        cascade="all, delete-orphan",
        passive_deletes=True,
        doc="Links to the teams this task is tagged with",
    )

    attachments = relationship(
        "TaskAttachment",
        back_populates="task",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="[TaskAttachment.created_at.desc(), TaskAttachment.id.desc()]",
        doc="Files uploaded for this task",
    )

    def __repr__(self):
        return f"<Task(id={self.id}, name='{self.name}', status='{self.status}')>"
