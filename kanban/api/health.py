from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from kanban import __version__
from kanban.db import check_db_connection, get_stats
from kanban.schemas import ApiResponse, ErrorResponse
from kanban.utils.logger import setup_logger

logger = setup_logger("api.health")

router = APIRouter(tags=["Health"])


@router.get("/")
async def api_info(request: Request):
    """API name, version and runtime environment."""
    settings = request.app.state.settings
    return ApiResponse(
        message="Kanban Backend API",
        data={
            "name": "Kanban Backend API",
            "version": __version__,
            "description": "REST API for Kanban board application",
            "environment": settings.environment,
        },
    )


@router.get("/health")
async def health_check(request: Request):
    """Database connectivity and row counts."""
    engine = request.app.state.engine
    try:
        await check_db_connection(engine)
        stats = await get_stats(engine)
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=ErrorResponse(message="Database connection failed").model_dump(),
        )

    return ApiResponse(
        message="Kanban Backend API is running",
        data={
            "database": "connected",
            "stats": {
                "users": stats.users,
                "teams": stats.teams,
                "tasks": stats.tasks,
                "attachments": stats.attachments,
            },
        },
    )
