from fastapi import APIRouter, Depends

from kanban.db_handlers import TeamDBHandler
from kanban.dependencies import (
    AuthenticatedUser,
    get_current_identity,
    get_team_db_handler,
)
from kanban.schemas import ApiResponse, TeamResponse
from kanban.utils.logger import setup_logger

logger = setup_logger("api.teams")

router = APIRouter(prefix="/api/teams", tags=["Teams"])


@router.get("", response_model=ApiResponse[list[TeamResponse]])
async def get_teams(
    current_user: AuthenticatedUser = Depends(get_current_identity),
    team_db_handler: TeamDBHandler = Depends(get_team_db_handler),
):
    """Fixed list of teams a task can be tagged with, sorted by name."""
    logger.info("GET /api/teams")
    teams = await team_db_handler.list_teams()
    logger.info(f"Retrieved {len(teams)} teams")
    return ApiResponse(
        message="Teams retrieved successfully",
        data=[TeamResponse.model_validate(team) for team in teams],
    )
