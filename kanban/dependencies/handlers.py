"""
Per-request providers for db handlers and services.

The engine, session factory and token service are created once in the app
lifespan and kept on ``app.state``; these providers hand them to the handler
objects a route needs.
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from kanban.db_handlers import TaskDBHandler, TeamDBHandler
from kanban.dependencies.auth import get_token_service
from kanban.services.auth_service import AuthService
from kanban.utils.auth import TokenService


def get_session_factory(request: Request) -> async_sessionmaker[AsyncSession]:
    return request.app.state.session_factory


def get_task_db_handler(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> TaskDBHandler:
    return TaskDBHandler(session_factory)


def get_team_db_handler(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> TeamDBHandler:
    return TeamDBHandler(session_factory)


def get_auth_service(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
    token_service: TokenService = Depends(get_token_service),
) -> AuthService:
    return AuthService(session_factory, token_service)
