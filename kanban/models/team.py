"""
Team reference data.

Teams are a fixed, seeded set; tasks link to them through ``task_teams``.
"""

from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from kanban.models.base import Base, CreatedAtMixin, IntegerIDMixin

DEFAULT_TEAMS = ("DESIGN", "BACKEND", "FRONTEND")


class Team(Base, IntegerIDMixin, CreatedAtMixin):
    __tablename__ = "teams"

    name = Column(
        String(50),
        nullable=False,
        unique=True,
        comment="Unique team name, e.g. BACKEND",
    )

    task_associations = relationship(
        "TaskTeam",
        back_populates="team",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self):
        return f"<Team(id={self.id}, name='{self.name}')>"
