"""
Task-Team association model for the many-to-many relationship.

Architecture:
    Task ←→ TaskTeam ←→ Team

A (task, team) pair appears at most once. Deleting either side removes the
link through ``ON DELETE CASCADE``.
"""

from sqlalchemy import Column, ForeignKey, Index, Integer, UniqueConstraint
from sqlalchemy.orm import relationship

from kanban.models.base import Base, CreatedAtMixin, IntegerIDMixin


class TaskTeam(Base, IntegerIDMixin, CreatedAtMixin):
    __tablename__ = "task_teams"
    __table_args__ = (
        UniqueConstraint("task_id", "team_id", name="uq_task_team"),
        Index("ix_task_teams_task_id", "task_id"),
        Index("ix_task_teams_team_id", "team_id"),
    )

    task_id = Column(
        Integer,
        ForeignKey("tasks.id", ondelete="CASCADE"),
        nullable=False,
        comment="Tagged task",
    )

    team_id = Column(
        Integer,
        ForeignKey("teams.id", ondelete="CASCADE"),
        nullable=False,
        comment="Team the task is tagged with",
    )

    task = relationship("Task", back_populates="team_associations")

    team = relationship("Team", back_populates="task_associations")

    def __repr__(self):
        return f"<TaskTeam(task_id={self.task_id}, team_id={self.team_id})>"
