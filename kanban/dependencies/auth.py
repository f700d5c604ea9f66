"""
Authorization gate for protected routes.

Every protected route depends on ``get_current_identity``. The gate reads the
bearer token, validates it with the app's TokenService and hands the identity
to the route. It never touches the database. All rejections carry the same
public message; only the log line says why.
"""

from dataclasses import dataclass

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from kanban.errors import AuthenticationError, MissingToken, TokenError
from kanban.utils.auth import TokenService
from kanban.utils.logger import setup_logger

logger = setup_logger("auth_gate")

# auto_error=False so a missing or malformed header reaches our own handling
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AuthenticatedUser:
    id: int
    username: str
    name: str


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


async def get_current_identity(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    token_service: TokenService = Depends(get_token_service),
) -> AuthenticatedUser:
    """
    Dependency to get the authenticated identity from the bearer token.
    """
    route = f"{request.method} {request.url.path}"

    if credentials is None:
        if request.headers.get("Authorization") is None:
            logger.warning(f"{route} rejected: no Authorization header")
            raise MissingToken(AuthenticationError.default_message)
        logger.warning(f"{route} rejected: malformed Authorization header")
        raise AuthenticationError()

    try:
        claims = token_service.validate(credentials.credentials)
    except TokenError as e:
        logger.warning(f"{route} rejected: {e.reason}")
        raise AuthenticationError() from e

    return AuthenticatedUser(id=claims.user_id, username=claims.username, name=claims.name)
