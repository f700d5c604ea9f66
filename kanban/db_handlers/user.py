from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from kanban.db_handlers.base import BaseDBHandler, check_local_db
from kanban.models.user import User
from kanban.utils.logger import setup_logger

logger = setup_logger("db_handlers.user")


class UserDBHandler(BaseDBHandler[User]):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        super().__init__(User, session_factory)

    @check_local_db
    async def get_user_by_username(
        self, username: str, *, db: AsyncSession = None
    ) -> User | None:
        """Get a user by username. A missing user is ``None``, not an error."""
        return await self.get_by_attributes(username=username, db=db)
