from kanban.dependencies.auth import (
    AuthenticatedUser,
    get_current_identity,
    get_token_service,
)
from kanban.dependencies.handlers import (
    get_auth_service,
    get_session_factory,
    get_task_db_handler,
    get_team_db_handler,
)

__all__ = [
    "AuthenticatedUser",
    "get_current_identity",
    "get_token_service",
    "get_auth_service",
    "get_session_factory",
    "get_task_db_handler",
    "get_team_db_handler",
]
