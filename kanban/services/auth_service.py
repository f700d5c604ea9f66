"""
Credential checks and token issuance for the login flow.

``authenticate`` never says which factor failed: an unknown username and a
wrong password both come back as ``None``, and both pay for one bcrypt
comparison so timing does not tell them apart either. bcrypt runs in a
worker thread, off the event loop.
"""

import asyncio

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from kanban.db_handlers.user import UserDBHandler
from kanban.models import User
from kanban.schemas import LoginResponseData, UserResponse
from kanban.utils.auth import TokenService, get_password_hash, verify_password
from kanban.utils.logger import setup_logger

logger = setup_logger("auth_service")

# Compared against when the username does not exist
_DUMMY_PASSWORD_HASH = get_password_hash("kanban-dummy-password")


class AuthService:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        token_service: TokenService,
    ):
        self.users = UserDBHandler(session_factory)
        self.token_service = token_service

    async def authenticate(self, username: str, password: str) -> User | None:
        user = await self.users.get_user_by_username(username)
        if user is None:
            await asyncio.to_thread(verify_password, password, _DUMMY_PASSWORD_HASH)
            logger.warning(f"Login failed: user not found - {username}")
            return None

        if not await asyncio.to_thread(verify_password, password, user.password_hash):
            logger.warning(f"Login failed: invalid password for user - {username}")
            return None

        return user

    async def login(self, username: str, password: str) -> LoginResponseData | None:
        user = await self.authenticate(username, password)
        if user is None:
            return None

        token = self.token_service.issue(user.id, user.username, user.name)
        return LoginResponseData(token=token, user=UserResponse.model_validate(user))

    async def get_user(self, user_id: int) -> UserResponse | None:
        user = await self.users.get(user_id)
        if user is None:
            return None
        return UserResponse.model_validate(user)
