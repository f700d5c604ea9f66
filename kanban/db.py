import argparse
import asyncio
from dataclasses import dataclass

from sqlalchemy import event, func, inspect, select, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from kanban.config import Settings, load_settings
from kanban.models import (
    DEFAULT_TEAMS,
    Base,
    Task,
    TaskAttachment,
    Team,
    User,
)
from kanban.utils.auth import get_password_hash
from kanban.utils.logger import setup_logger

logger = setup_logger("db")

EXPECTED_TABLES = ["task_attachments", "task_teams", "tasks", "teams", "users"]


@dataclass(frozen=True)
class DatabaseStats:
    users: int
    teams: int
    tasks: int
    attachments: int

    def log_stats(self):
        logger.info(
            f"Database statistics: users={self.users}, teams={self.teams}, "
            f"tasks={self.tasks}, attachments={self.attachments}"
        )


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE unless this is set per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_app_engine(settings: Settings) -> AsyncEngine:
    """Build the process-wide engine (and its bounded pool) from settings."""
    logger.debug(f"Creating engine for {settings.database_url.split('://', 1)[0]}")
    if settings.is_sqlite:
        engine = create_async_engine(settings.database_url, echo=False)
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    return create_async_engine(
        settings.database_url,
        pool_pre_ping=True,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_timeout=settings.db_pool_timeout,
        pool_recycle=300,
        echo=False,
        connect_args={"timeout": 30},
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def init_db(engine: AsyncEngine):
    """Create missing tables and seed the fixed team list."""
    logger.debug(f"Tables registered in metadata: {list(Base.metadata.tables.keys())}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    await seed_teams(engine)
    logger.info("Database schema initialized.")


async def seed_teams(engine: AsyncEngine):
    async with create_session_factory(engine)() as session:
        result = await session.execute(select(Team.name))
        existing = set(result.scalars().all())
        missing = [name for name in DEFAULT_TEAMS if name not in existing]
        if missing:
            session.add_all([Team(name=name) for name in missing])
            await session.commit()
            logger.info(f"Seeded teams: {missing}")


async def seed_user(
    engine: AsyncEngine, username: str, password: str, name: str, rounds: int = 12
) -> int:
    """Insert a user if the username is free. Returns the user id either way."""
    async with create_session_factory(engine)() as session:
        result = await session.execute(select(User).where(User.username == username))
        user = result.scalar_one_or_none()
        if user is not None:
            logger.info(f"User '{username}' already exists (id={user.id}).")
            return user.id

        user = User(
            username=username,
            password_hash=get_password_hash(password, rounds=rounds),
            name=name,
        )
        session.add(user)
        await session.commit()
        logger.info(f"Created user '{username}' (id={user.id}).")
        return user.id


async def reset_db(engine: AsyncEngine):
    logger.warning("Dropping all kanban tables. THIS IS A DESTRUCTIVE OPERATION.")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await init_db(engine)
    logger.info("Database has been reset and re-initialized.")


async def list_tables(engine: AsyncEngine) -> list[str]:
    async with engine.connect() as conn:
        table_names = await conn.run_sync(
            lambda sync_conn: inspect(sync_conn).get_table_names()
        )
    return sorted(table_names)


async def check_tables(engine: AsyncEngine) -> list[str]:
    """Return the expected tables that are missing, logging what was found."""
    found = await list_tables(engine)
    logger.info(f"Found tables: {found}")
    missing = [name for name in EXPECTED_TABLES if name not in found]
    if missing:
        logger.warning(
            f"Missing tables: {missing}. Run 'python -m kanban.db init' to create them."
        )
    return missing


async def get_stats(engine: AsyncEngine) -> DatabaseStats:
    async with create_session_factory(engine)() as session:
        counts = {}
        for key, model in (
            ("users", User),
            ("teams", Team),
            ("tasks", Task),
            ("attachments", TaskAttachment),
        ):
            result = await session.execute(select(func.count()).select_from(model))
            counts[key] = result.scalar_one()
    return DatabaseStats(**counts)


async def check_db_connection(engine: AsyncEngine) -> bool:
    """Performs a simple query to check actual DB connectivity."""
    try:
        async with engine.connect() as conn:
            result = await conn.execute(text("SELECT 1"))
            if result.scalar_one() == 1:
                logger.info("Successfully connected to the database.")
                return True
        logger.error("Test query did not return 1.")
        return False
    except Exception as e:
        logger.error(f"Failed to execute test query: {e}", exc_info=True)
        raise RuntimeError("Database connectivity check failed.") from e


async def _run_action(args: argparse.Namespace):
    settings = load_settings()
    engine = create_app_engine(settings)
    try:
        if args.action == "init":
            await init_db(engine)
        elif args.action == "reset":
            await reset_db(engine)
        elif args.action == "list-tables":
            for name in await list_tables(engine):
                print(name)
        elif args.action == "stats":
            stats = await get_stats(engine)
            stats.log_stats()
        elif args.action == "seed-admin":
            await init_db(engine)
            await seed_user(engine, args.username, args.password, args.name)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Kanban database utility")
    parser.add_argument(
        "action",
        choices=["init", "reset", "list-tables", "stats", "seed-admin"],
        help="'init' creates tables and seeds teams, "
        "'reset' drops and recreates every table, "
        "'list-tables' prints the tables found, "
        "'stats' logs row counts, "
        "'seed-admin' creates the initial user.",
    )
    parser.add_argument("--username", default="admin")
    parser.add_argument("--password", default="admin123")
    parser.add_argument("--name", default="Administrator")
    args = parser.parse_args()

    if args.action == "reset":
        confirm = input(
            "WARNING: This will delete all kanban data. Are you sure? (yes/no): "
        )
        if confirm.lower() != "yes":
            logger.info("Database reset cancelled by user.")
            raise SystemExit(0)

    asyncio.run(_run_action(args))
    logger.info("Database utility script finished.")
