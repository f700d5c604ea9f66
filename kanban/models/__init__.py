"""
Database models for the kanban board.

Architecture: User → Task ←→ Team (via TaskTeam), Task → TaskAttachment.
"""

from kanban.models.base import Base
from kanban.models.task import Task, TaskStatus
from kanban.models.task_attachment import TaskAttachment
from kanban.models.task_team import TaskTeam
from kanban.models.team import DEFAULT_TEAMS, Team
from kanban.models.user import User

__all__ = [
    "Base",
    # Core models
    "User",
    "Task",
    "TaskStatus",
    "Team",
    "DEFAULT_TEAMS",
    # Association and child models
    "TaskTeam",
    "TaskAttachment",
]
