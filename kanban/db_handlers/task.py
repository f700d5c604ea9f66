from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload
from sqlalchemy.sql.functions import now as db_now

from kanban.db_handlers.base import BaseDBHandler, check_local_db
from kanban.db_handlers.team import TeamDBHandler
from kanban.errors import AuthenticationError, NotFoundError
from kanban.models import Task, TaskAttachment, TaskTeam, User
from kanban.schemas import (
    AttachmentSimple,
    CreateTaskRequest,
    TaskRead,
    UpdateTaskRequest,
)
from kanban.utils.logger import setup_logger

logger = setup_logger("task_db_handler")

TASK_LOAD_OPTIONS = (
    selectinload(Task.team_associations).selectinload(TaskTeam.team),
    selectinload(Task.attachments),
)


class TaskDBHandler(BaseDBHandler[Task]):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        super().__init__(Task, session_factory)
        self.teams = TeamDBHandler(session_factory)

    async def _load_task(self, task_id: int, db: AsyncSession) -> Task | None:
        stmt = (
            select(Task)
            .where(Task.id == task_id)
            .options(*TASK_LOAD_OPTIONS)
            .execution_options(populate_existing=True)
        )
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    async def _link_teams(self, task_id: int, team_ids: list[int], db: AsyncSession):
        db.add_all([TaskTeam(task_id=task_id, team_id=team_id) for team_id in team_ids])
        await db.flush()

    @check_local_db
    async def create_task(
        self, created_by: int, data: CreateTaskRequest, *, db: AsyncSession = None
    ) -> TaskRead:
        """Insert a task and its team links in one transaction."""
        # Unknown teams are rejected before any row is written
        team_ids = await self.teams.resolve_team_ids(data.teams, db=db)

        if await db.get(User, created_by) is None:
            logger.warning(f"Token refers to missing user id {created_by}")
            raise AuthenticationError()

        task = await self.create(
            {
                "name": data.name,
                "description": data.description,
                "status": data.status.value,
                "external_link": data.external_link,
                "created_by": created_by,
            },
            db=db,
        )
        await self._link_teams(task.id, team_ids, db)

        return TaskRead.from_model(await self._load_task(task.id, db))

    @check_local_db
    async def get_task(
        self, task_id: int, *, db: AsyncSession = None
    ) -> TaskRead | None:
        task = await self._load_task(task_id, db)
        if task is None:
            return None
        return TaskRead.from_model(task)

    @check_local_db
    async def list_tasks(self, *, db: AsyncSession = None) -> list[TaskRead]:
        """All tasks in creation order (oldest first, id breaks ties)."""
        tasks = await self.get_multi_by_attributes(
            options=list(TASK_LOAD_OPTIONS),
            order_by=[Task.created_at.asc(), Task.id.asc()],
            db=db,
        )
        return [TaskRead.from_model(task) for task in tasks]

    @check_local_db
    async def update_task(
        self, task_id: int, data: UpdateTaskRequest, *, db: AsyncSession = None
    ) -> TaskRead:
        """Apply the fields present in ``data``.

        When ``teams`` is present the association set is replaced as a whole
        within the same transaction.
        """
        task = await self.get(task_id, db=db)
        if task is None:
            raise NotFoundError("Task not found")

        team_ids = None
        if data.replaces_teams:
            team_ids = await self.teams.resolve_team_ids(data.teams, db=db)

        changes = data.changes()
        if "status" in changes:
            changes["status"] = changes["status"].value
        # Bump even when only the team links change
        changes["updated_at"] = db_now()
        await self.update(task, changes, db=db)

        if team_ids is not None:
            await db.execute(delete(TaskTeam).where(TaskTeam.task_id == task_id))
            await self._link_teams(task_id, team_ids, db)

        return TaskRead.from_model(await self._load_task(task_id, db))

    @check_local_db
    async def delete_task(self, task_id: int, *, db: AsyncSession = None) -> bool:
        """Delete a task; team links and attachments go with it."""
        task = await self.remove(task_id, db=db)
        if task is None:
            raise NotFoundError("Task not found")
        return True

    @check_local_db
    async def list_attachments(
        self, task_id: int, *, db: AsyncSession = None
    ) -> list[AttachmentSimple]:
        """Attachments of a task, newest first."""
        if await self.get(task_id, db=db) is None:
            raise NotFoundError("Task not found")

        result = await db.execute(
            select(TaskAttachment)
            .where(TaskAttachment.task_id == task_id)
            .order_by(TaskAttachment.created_at.desc(), TaskAttachment.id.desc())
        )
        return [
            AttachmentSimple(name=a.file_name, url=a.cloudinary_secure_url)
            for a in result.scalars().all()
        ]
