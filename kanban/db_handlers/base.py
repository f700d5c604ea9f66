from __future__ import annotations

from functools import wraps
from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from kanban.errors import KanbanError, ServiceError
from kanban.models.base import Base
from kanban.utils.logger import setup_logger

logger = setup_logger("db_handlers")


ModelType = TypeVar("ModelType", bound=Base)


def check_local_db(func):
    """Run the call inside one session and one transaction.

    The outermost call opens a session from the handler's factory, commits on
    success and rolls back on any exception. Nested calls that already carry
    ``db`` reuse the caller's session so the whole operation stays atomic.
    Store failures are logged and re-raised as ``ServiceError``; nothing is
    retried here.
    """

    @wraps(func)
    async def wrapper(self, *args, **kwargs):
        if kwargs.get("db") is not None:
            return await func(self, *args, **kwargs)

        async with self.session_factory() as db:
            kwargs["db"] = db
            try:
                result = await func(self, *args, **kwargs)
                await db.commit()
                return result
            except KanbanError:
                await db.rollback()
                raise
            except (SQLAlchemyError, OSError) as e:
                await db.rollback()
                logger.error(
                    f"Transaction failed in {type(self).__name__}.{func.__name__}: {e}",
                    exc_info=True,
                )
                raise ServiceError() from e
            except Exception:
                await db.rollback()
                raise

    return wrapper


class BaseDBHandler(Generic[ModelType]):
    """Generic handler for database operations with basic CRUD methods."""

    def __init__(
        self,
        model: type[ModelType],
        session_factory: async_sessionmaker[AsyncSession],
    ):
        self.model = model
        self.session_factory = session_factory

    @check_local_db
    async def create(
        self, obj_dict: dict[str, Any], *, db: AsyncSession = None
    ) -> ModelType:
        """Add a new record and flush it so generated columns are populated."""
        db_obj = self.model(**obj_dict)
        db.add(db_obj)
        await db.flush()
        await db.refresh(db_obj)
        return db_obj

    @check_local_db
    async def get(self, id: Any, *, db: AsyncSession = None) -> ModelType | None:
        """Get a single record by its primary key."""
        stmt = select(self.model).where(self.model.id == id)
        result = await db.execute(stmt)
        return result.scalars().first()

    @check_local_db
    async def get_by_attributes(
        self, *, db: AsyncSession = None, **kwargs
    ) -> ModelType | None:
        """Get a single record by a set of attributes."""
        options_to_load = kwargs.pop("options", None)

        stmt = select(self.model).filter_by(**kwargs)
        if options_to_load:
            stmt = stmt.options(*options_to_load)

        result = await db.execute(stmt)
        return result.scalars().first()

    @check_local_db
    async def get_multi_by_attributes(
        self, *, db: AsyncSession = None, **kwargs
    ) -> list[ModelType]:
        """Get multiple records by a set of attributes."""
        order_by_clauses = kwargs.pop("order_by", None)
        options_to_load = kwargs.pop("options", None)

        stmt = select(self.model).filter_by(**kwargs)

        if options_to_load:
            stmt = stmt.options(*options_to_load)

        if order_by_clauses is not None:
            if isinstance(order_by_clauses, list):
                stmt = stmt.order_by(*order_by_clauses)
            else:
                stmt = stmt.order_by(order_by_clauses)

        result = await db.execute(stmt)
        return list(result.scalars().all())

    @check_local_db
    async def update(
        self,
        db_obj: ModelType,
        update_data: dict[str, Any],
        *,
        db: AsyncSession = None,
    ) -> ModelType:
        """Apply ``update_data`` to ``db_obj`` and flush."""
        for field, value in update_data.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)

        db.add(db_obj)
        await db.flush()
        await db.refresh(db_obj)
        return db_obj

    @check_local_db
    async def remove(self, id: Any, *, db: AsyncSession = None) -> ModelType | None:
        """Delete a record by primary key. Returns the deleted object, or None."""
        obj = await self.get(id, db=db)
        if obj is None:
            return None
        await db.delete(obj)
        await db.flush()
        return obj
