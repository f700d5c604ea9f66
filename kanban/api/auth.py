# Authentication API routes: login, stateless logout and current user lookup

from fastapi import APIRouter, Depends

from kanban.dependencies import AuthenticatedUser, get_auth_service, get_current_identity
from kanban.errors import AuthenticationError
from kanban.schemas import ApiResponse, LoginRequest, LoginResponseData, UserResponse
from kanban.services.auth_service import AuthService
from kanban.utils.logger import setup_logger

logger = setup_logger("api.auth")

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.post("/login", response_model=ApiResponse[LoginResponseData])
async def login(
    login_req: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Verify credentials and return a bearer token with the user profile."""
    logger.info(f"POST /api/auth/login - Login attempt for: {login_req.username}")

    data = await auth_service.login(login_req.username, login_req.password)
    if data is None:
        raise AuthenticationError("Invalid credentials")

    logger.info(f"Login successful for user: {login_req.username}")
    return ApiResponse(message="Login successful", data=data)


@router.post("/logout", response_model=ApiResponse[bool])
async def logout(current_user: AuthenticatedUser = Depends(get_current_identity)):
    """
    Stateless logout. The server keeps no session, so the client discards the
    token; nothing is invalidated here.
    """
    logger.info(f"POST /api/auth/logout - user {current_user.username}")
    return ApiResponse(message="Successfully logout from the system", data=True)


@router.get("/me", response_model=ApiResponse[UserResponse])
async def get_me(
    current_user: AuthenticatedUser = Depends(get_current_identity),
    auth_service: AuthService = Depends(get_auth_service),
):
    """Current user profile, or ``null`` if the account no longer exists."""
    logger.info(f"GET /api/auth/me - user id {current_user.id}")

    user = await auth_service.get_user(current_user.id)
    if user is None:
        logger.warning(f"User not found for ID: {current_user.id}")

    return ApiResponse(message="Successfully retrieved user data", data=user)
