"""
Centralized configuration management using pydantic-settings.

Settings are loaded once at startup, frozen, and handed to the components that
need them (engine factory, token service, CORS middleware). Nothing reads the
environment after that.
"""

import json
from typing import Annotated

from dotenv import load_dotenv
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from kanban.utils.logger import setup_logger

logger = setup_logger("core_config")

MIN_JWT_SECRET_LENGTH = 32


class Settings(BaseSettings):
    """
    Application settings managed by pydantic-settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    # ===== Database Configuration =====
    database_url: str = Field(
        ...,
        alias="DATABASE_URL",
        description="Application database URL (PostgreSQL or SQLite)",
    )

    db_pool_size: int = Field(
        default=10,
        alias="DB_POOL_SIZE",
        description="Number of persistent connections kept in the pool",
    )

    db_max_overflow: int = Field(
        default=20,
        alias="DB_MAX_OVERFLOW",
        description="Connections allowed above the pool size under load",
    )

    db_pool_timeout: int = Field(
        default=30,
        alias="DB_POOL_TIMEOUT",
        description="Seconds to wait for a pooled connection",
    )

    auto_create_schema: bool = Field(
        default=True,
        alias="AUTO_CREATE_SCHEMA",
        description="Create missing tables and seed teams on startup",
    )

    # ===== Authentication Configuration =====
    jwt_secret: str = Field(
        ...,
        alias="JWT_SECRET",
        description="HS256 signing secret, at least 32 characters",
        repr=False,
    )

    access_token_expire_minutes: int = Field(
        default=1440,
        alias="ACCESS_TOKEN_EXPIRE_MINUTES",
        description="Access token lifetime in minutes (default 24 hours)",
        gt=0,
    )

    # ===== Server Configuration =====
    environment: str = Field(
        default="development",
        alias="ENVIRONMENT",
        description="Deployment environment name",
    )

    server_host: str = Field(
        default="0.0.0.0", alias="SERVER_HOST", description="Server host address"
    )

    server_port: int = Field(
        default=8080, alias="SERVER_PORT", description="Server port number"
    )

    server_workers: int = Field(
        default=1, alias="SERVER_WORKERS", description="Number of uvicorn workers"
    )

    # ===== CORS Configuration =====
    cors_allowed_origins: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: [
            "http://localhost:3001",
            "https://kanban-fe.vercel.app",
        ],
        alias="CORS_ALLOWED_ORIGINS",
        description="Comma-separated list of allowed frontend origins",
    )

    @field_validator("database_url")
    @classmethod
    def normalize_database_url(cls, value: str) -> str:
        if value.startswith("postgresql+asyncpg://") or value.startswith(
            "sqlite+aiosqlite://"
        ):
            return value
        if value.startswith("postgresql://"):
            return value.replace("postgresql://", "postgresql+asyncpg://", 1)
        if value.startswith("postgres://"):
            return value.replace("postgres://", "postgresql+asyncpg://", 1)
        raise ValueError(f"Unsupported DATABASE_URL scheme: {value.split(':', 1)[0]}")

    @field_validator("jwt_secret")
    @classmethod
    def check_jwt_secret_strength(cls, value: str) -> str:
        if len(value) < MIN_JWT_SECRET_LENGTH:
            raise ValueError(
                f"JWT_SECRET must be at least {MIN_JWT_SECRET_LENGTH} characters long"
            )
        return value

    @field_validator("cors_allowed_origins", mode="before")
    @classmethod
    def split_origins(cls, value):
        if isinstance(value, str):
            value = value.strip()
            if value.startswith("["):
                return json.loads(value)
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @model_validator(mode="after")
    def log_settings(self) -> "Settings":
        logger.debug(f"Environment: {self.environment}")
        logger.debug(f"Database backend: {self.database_url.split('://', 1)[0]}")
        if not self.is_development and "*" in self.cors_allowed_origins:
            logger.warning("Wildcard CORS origin configured outside development.")
        return self

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


def load_settings() -> Settings:
    """Read ``.env`` into the process environment and build the settings object."""
    load_dotenv()
    return Settings()
