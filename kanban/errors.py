"""
Error taxonomy shared by handlers, services and the HTTP layer.

Every error carries the HTTP status it maps to and the message that is safe to
show to clients. Internal detail goes to the logs, never into ``message``.
"""

from fastapi import status


class KanbanError(Exception):
    """Base class for errors rendered as the error envelope."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Something went wrong"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(KanbanError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class AuthenticationError(KanbanError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"


class TokenError(AuthenticationError):
    """A bearer token could not be turned into an identity."""

    reason: str = "token rejected"


class MissingToken(TokenError):
    reason = "missing token"


class InvalidToken(TokenError):
    reason = "invalid token"


class ExpiredToken(TokenError):
    reason = "expired token"


class NotFoundError(KanbanError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class ServiceError(KanbanError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Database operation failed"
