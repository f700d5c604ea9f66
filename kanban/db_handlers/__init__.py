from kanban.db_handlers.base import BaseDBHandler, check_local_db
from kanban.db_handlers.task import TaskDBHandler
from kanban.db_handlers.team import TeamDBHandler
from kanban.db_handlers.user import UserDBHandler

__all__ = [
    "BaseDBHandler",
    "check_local_db",
    "TaskDBHandler",
    "TeamDBHandler",
    "UserDBHandler",
]
