"""
Authentication utilities with JWT tokens and bcrypt password hashing.

- bcrypt with salt for password hashing
- HS256 only for JWT signing; the accepted algorithm list is fixed here, not
  read from the token header
- Token lifetime and secret come from Settings through ``TokenService``
- UTC timezone consistency
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt

from kanban.config import MIN_JWT_SECRET_LENGTH
from kanban.errors import ExpiredToken, InvalidToken
from kanban.utils.logger import setup_logger

logger = setup_logger("auth")

ALGORITHM = "HS256"

DECODE_OPTIONS = {
    "verify_signature": True,
    "verify_exp": True,
    "verify_iat": True,
    "require_exp": True,
    "require_iat": True,
    "require_sub": True,
}


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain text password against a bcrypt hash."""
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"), hashed_password.encode("utf-8")
        )
    except ValueError as e:
        # Stored value is not a bcrypt hash; treat as a mismatch
        logger.error(f"Password hash could not be checked: {e}")
        return False


def get_password_hash(password: str, rounds: int = 12) -> str:
    """Hash a plain text password using bcrypt."""
    salt = bcrypt.gensalt(rounds=rounds)
    hashed_password = bcrypt.hashpw(password=password.encode("utf-8"), salt=salt)
    return hashed_password.decode("utf-8")


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    username: str
    name: str
    issued_at: datetime
    expires_at: datetime


class TokenService:
    """Issues and validates the stateless bearer tokens."""

    def __init__(
        self,
        secret_key: str,
        expire_minutes: int = 1440,
        clock: Callable[[], datetime] | None = None,
    ):
        if len(secret_key) < MIN_JWT_SECRET_LENGTH:
            raise ValueError(
                f"Signing key must be at least {MIN_JWT_SECRET_LENGTH} characters"
            )
        self._secret_key = secret_key
        self.expires_delta = timedelta(minutes=expire_minutes)
        self._clock = clock or (lambda: datetime.now(UTC))

    def issue(
        self, user_id: int, username: str, name: str, now: datetime | None = None
    ) -> str:
        issued_at = now or self._clock()
        claims = {
            "sub": str(user_id),
            "username": username,
            "name": name,
            "iat": issued_at,
            "exp": issued_at + self.expires_delta,
        }
        return jwt.encode(claims, self._secret_key, algorithm=ALGORITHM)

    def validate(self, token: str) -> TokenClaims:
        """Decode ``token``; raises ExpiredToken or InvalidToken."""
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[ALGORITHM],
                options=DECODE_OPTIONS,
            )
        except ExpiredSignatureError as e:
            raise ExpiredToken() from e
        except JWTError as e:
            raise InvalidToken() from e

        try:
            user_id = int(payload["sub"])
        except (TypeError, ValueError) as e:
            raise InvalidToken() from e

        return TokenClaims(
            user_id=user_id,
            username=str(payload.get("username", "")),
            name=str(payload.get("name", "")),
            issued_at=datetime.fromtimestamp(payload["iat"], UTC),
            expires_at=datetime.fromtimestamp(payload["exp"], UTC),
        )
