from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from kanban.db_handlers.base import BaseDBHandler, check_local_db
from kanban.errors import ValidationError
from kanban.models.team import Team
from kanban.utils.logger import setup_logger

logger = setup_logger("db_handlers.team")


class TeamDBHandler(BaseDBHandler[Team]):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        super().__init__(Team, session_factory)

    @check_local_db
    async def list_teams(self, *, db: AsyncSession = None) -> list[Team]:
        return await self.get_multi_by_attributes(order_by=Team.name, db=db)

    @check_local_db
    async def resolve_team_ids(
        self, names: list[str], *, db: AsyncSession = None
    ) -> list[int]:
        """Map team names to ids, in input order.

        Raises ValidationError naming the first unknown team.
        """
        if not names:
            return []

        result = await db.execute(select(Team.id, Team.name).where(Team.name.in_(names)))
        ids_by_name = {name: team_id for team_id, name in result.all()}

        for name in names:
            if name not in ids_by_name:
                logger.warning(f"Unknown team requested: '{name}'")
                raise ValidationError(f"Team '{name}' not found")

        return [ids_by_name[name] for name in names]
