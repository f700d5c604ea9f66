"""
Shared fixtures for the test suite.

Tests run against a throwaway SQLite file (through aiosqlite) per test, so no
PostgreSQL server is needed. The HTTP tests use FastAPI's TestClient, which
runs the application lifespan; the database is seeded beforehand with an
``admin`` / ``admin123`` account.
"""

import asyncio
from collections.abc import Generator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from fastapi.testclient import TestClient

from kanban.config import Settings
from kanban.db import create_app_engine, create_session_factory, init_db, seed_user

TEST_JWT_SECRET = "test-only-signing-secret-0123456789abcdef"
ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "admin123"
ADMIN_NAME = "Administrator"

# Cheap bcrypt cost for fixtures
TEST_BCRYPT_ROUNDS = 4


@pytest.fixture
def database_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'kanban.db'}"


@pytest.fixture
def settings(database_url: str) -> Settings:
    return Settings(
        _env_file=None,
        DATABASE_URL=database_url,
        JWT_SECRET=TEST_JWT_SECRET,
        ENVIRONMENT="test",
    )


# ----- async fixtures for db handler tests -----


@pytest_asyncio.fixture
async def engine(settings: Settings):
    engine_ = create_app_engine(settings)
    await init_db(engine_)
    yield engine_
    await engine_.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return create_session_factory(engine)


@pytest_asyncio.fixture
async def user_id(engine) -> int:
    return await seed_user(
        engine, "alice", "alice-password", "Alice", rounds=TEST_BCRYPT_ROUNDS
    )


# ----- HTTP fixtures -----


@pytest.fixture
def admin_id(settings: Settings) -> int:
    """Create the schema and the admin account before the app starts."""

    async def _seed() -> int:
        engine_ = create_app_engine(settings)
        try:
            await init_db(engine_)
            return await seed_user(
                engine_,
                ADMIN_USERNAME,
                ADMIN_PASSWORD,
                ADMIN_NAME,
                rounds=TEST_BCRYPT_ROUNDS,
            )
        finally:
            await engine_.dispose()

    return asyncio.run(_seed())


@pytest.fixture
def app(settings: Settings, admin_id: int) -> FastAPI:
    # Import the factory here so each test gets a fresh application
    from main import create_app

    return create_app(settings)


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """
    Test client bound to the app. Entering the context runs the lifespan
    (engine creation, schema check) and leaving it disposes the engine.
    """
    with TestClient(app) as c:
        yield c


@pytest.fixture
def auth_headers(app: FastAPI, admin_id: int) -> dict[str, str]:
    token = app.state.token_service.issue(admin_id, ADMIN_USERNAME, ADMIN_NAME)
    return {"Authorization": f"Bearer {token}"}
