#!/usr/bin/env python3

"""
Main application entry point for the Kanban Backend API.

Architecture: FastAPI application over an async SQLAlchemy engine.
Key Features: Lifecycle management, database checks on startup, uniform
{status, message, data} envelope for every response including errors, CORS
configuration.
"""

import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from kanban.api.auth import router as auth_router
from kanban.api.health import router as health_router
from kanban.api.tasks import router as tasks_router
from kanban.api.teams import router as teams_router
from kanban.config import Settings, load_settings
from kanban.db import (
    check_db_connection,
    check_tables,
    create_app_engine,
    create_session_factory,
    get_stats,
    init_db,
)
from kanban.errors import KanbanError, ServiceError
from kanban.schemas import ErrorResponse
from kanban.utils.auth import TokenService
from kanban.utils.logger import setup_logger

logger = setup_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Create the engine and session factory, prepare the schema and verify the
    database before accepting requests.
    """
    settings: Settings = app.state.settings
    logger.info("Application startup...")

    engine = create_app_engine(settings)
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)

    try:
        if settings.auto_create_schema:
            logger.info("Initializing database...")
            await init_db(engine)
        else:
            await check_tables(engine)

        logger.info("Checking database connectivity...")
        await check_db_connection(engine)
        logger.info("Database connectivity confirmed.")

        (await get_stats(engine)).log_stats()
    except Exception as e:
        logger.critical(f"Startup error: {e}")
        await engine.dispose()
        raise SystemExit(f"Startup failed: {e}") from e

    logger.info(f"Kanban Backend API startup successful ({settings.environment}).")
    yield

    logger.info("Kanban Backend API shutdown...")
    await engine.dispose()
    logger.info("Shutdown complete.")


def _error_response(status_code: int, message: str, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message).model_dump(),
        headers=headers,
    )


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"

    first = errors[0]
    message = str(first.get("msg", "Invalid request"))
    if first.get("type") == "value_error":
        return message.removeprefix("Value error, ")

    field = next(
        (str(part) for part in reversed(first.get("loc", ())) if part != "body"),
        None,
    )
    if first.get("type") == "json_invalid" or field is None:
        return message
    return f"{field}: {message}"


def register_exception_handlers(app: FastAPI):
    @app.exception_handler(KanbanError)
    async def kanban_error_handler(request: Request, exc: KanbanError):
        route = f"{request.method} {request.url.path}"
        if isinstance(exc, ServiceError):
            logger.error(f"{route} failed: {exc.message}")
        else:
            logger.warning(f"{route} -> {exc.status_code}: {exc.message}")

        headers = None
        if exc.status_code == status.HTTP_401_UNAUTHORIZED:
            headers = {"WWW-Authenticate": "Bearer"}
        return _error_response(exc.status_code, exc.message, headers)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ):
        message = _validation_message(exc)
        logger.warning(f"{request.method} {request.url.path} -> 400: {message}")
        return _error_response(status.HTTP_400_BAD_REQUEST, message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return _error_response(exc.status_code, str(exc.detail), exc.headers)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled error on {request.method} {request.url.path}: {exc}",
            exc_info=exc,
        )
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "Something went wrong"
        )


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or load_settings()

    app = FastAPI(title="Kanban Backend API", lifespan=lifespan)
    app.state.settings = settings
    app.state.token_service = TokenService(
        settings.jwt_secret,
        expire_minutes=settings.access_token_expire_minutes,
    )

    register_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(tasks_router)
    app.include_router(teams_router)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=[
            "Authorization",
            "Content-Type",
            "Accept",
            "Origin",
            "X-Requested-With",
        ],
    )

    return app


def main():
    settings = load_settings()

    logger.info(
        f"Starting Kanban Backend API on {settings.server_host}:{settings.server_port}"
    )
    logger.info(f"Allowed frontend URLs: {settings.cors_allowed_origins}")

    try:
        uvicorn.run(
            "main:create_app",
            factory=True,
            host=settings.server_host,
            port=settings.server_port,
            workers=settings.server_workers,
        )
    except Exception as e:
        logger.error(f"Error starting server: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
