"""
Task API routes - CRUD over kanban cards and their team links.

Every route requires a bearer token. Lookups by id that find nothing return a
success envelope with ``data: null``; updates and deletes of a missing task are
404s.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, status

from kanban.db_handlers import TaskDBHandler
from kanban.dependencies import (
    AuthenticatedUser,
    get_current_identity,
    get_task_db_handler,
)
from kanban.schemas import (
    ApiResponse,
    AttachmentSimple,
    CreateTaskRequest,
    TaskRead,
    UpdateTaskRequest,
)
from kanban.utils.logger import setup_logger

logger = setup_logger("api.tasks")

router = APIRouter(prefix="/api/tasks", tags=["Tasks"])

# Ids are 32-bit in the schema; larger values never reach the driver
MAX_TASK_ID = 2**31 - 1
TaskId = Annotated[int, Path(ge=1, le=MAX_TASK_ID, description="Task id")]


@router.get("", response_model=ApiResponse[list[TaskRead]])
async def get_tasks(
    current_user: AuthenticatedUser = Depends(get_current_identity),
    task_db_handler: TaskDBHandler = Depends(get_task_db_handler),
):
    """List every task on the board, oldest first."""
    logger.info("GET /api/tasks")
    tasks = await task_db_handler.list_tasks()
    logger.info(f"Retrieved {len(tasks)} tasks")
    return ApiResponse(message="Tasks retrieved successfully", data=tasks)


@router.post(
    "",
    response_model=ApiResponse[TaskRead],
    status_code=status.HTTP_201_CREATED,
)
async def create_task(
    task_req: CreateTaskRequest,
    current_user: AuthenticatedUser = Depends(get_current_identity),
    task_db_handler: TaskDBHandler = Depends(get_task_db_handler),
):
    """Create a task owned by the caller. ``status`` defaults to TO_DO."""
    logger.info(f"POST /api/tasks - Creating new task: {task_req.name}")
    task = await task_db_handler.create_task(current_user.id, task_req)
    logger.info(f"Task created successfully with ID: {task.id}")
    return ApiResponse(message="Task created successfully", data=task)


@router.get("/{task_id}", response_model=ApiResponse[TaskRead])
async def get_task(
    task_id: TaskId,
    current_user: AuthenticatedUser = Depends(get_current_identity),
    task_db_handler: TaskDBHandler = Depends(get_task_db_handler),
):
    logger.info(f"GET /api/tasks/{task_id}")
    task = await task_db_handler.get_task(task_id)
    if task is None:
        logger.warning(f"Task not found: {task_id}")
        return ApiResponse(message="Task not found", data=None)
    return ApiResponse(message="Task retrieved successfully", data=task)


@router.put("/{task_id}", response_model=ApiResponse[TaskRead])
async def update_task(
    task_id: TaskId,
    task_req: UpdateTaskRequest,
    current_user: AuthenticatedUser = Depends(get_current_identity),
    task_db_handler: TaskDBHandler = Depends(get_task_db_handler),
):
    """Partial update: only the fields present in the body change."""
    logger.info(
        f"PUT /api/tasks/{task_id} - fields: {sorted(task_req.model_fields_set)}"
    )
    task = await task_db_handler.update_task(task_id, task_req)
    logger.info(f"Task updated successfully: {task_id}")
    return ApiResponse(message="Task updated successfully", data=task)


@router.delete("/{task_id}", response_model=ApiResponse[bool])
async def delete_task(
    task_id: TaskId,
    current_user: AuthenticatedUser = Depends(get_current_identity),
    task_db_handler: TaskDBHandler = Depends(get_task_db_handler),
):
    logger.info(f"DELETE /api/tasks/{task_id}")
    deleted = await task_db_handler.delete_task(task_id)
    logger.info(f"Task deleted successfully: {task_id}")
    return ApiResponse(message="Task deleted successfully", data=deleted)


@router.get(
    "/{task_id}/attachments", response_model=ApiResponse[list[AttachmentSimple]]
)
async def get_task_attachments(
    task_id: TaskId,
    current_user: AuthenticatedUser = Depends(get_current_identity),
    task_db_handler: TaskDBHandler = Depends(get_task_db_handler),
):
    logger.info(f"GET /api/tasks/{task_id}/attachments")
    attachments = await task_db_handler.list_attachments(task_id)
    logger.info(f"Retrieved {len(attachments)} attachments for task {task_id}")
    return ApiResponse(message="Attachments retrieved successfully", data=attachments)
