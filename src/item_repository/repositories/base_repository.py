"""
Base repository class providing common database operations.

This class serves as a reusable foundation for repositories that interact with
the database using SQLAlchemy's async sessions.

Repositories never commit: they add, flush and query inside whatever transaction
the caller opened on the session. Committing (or rolling back) is the job of the
layer that owns the session, here the Repository engine's unit of work.
"""
from item_repository.exceptions.base import StorageError
from item_repository.exceptions.mapper import db_error_handler

import time
from typing import TypeVar, Generic, Type, Any
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
import logging

from item_repository.database.base import Base

# Type variable for the model class
ModelType = TypeVar("ModelType", bound=Base)

# Setup logging
logger = logging.getLogger(__name__)


class BaseRepository(Generic[ModelType]):
    """
    Generic base repository providing add / find / delete by column.

    Type Parameters:
        ModelType: The SQLAlchemy model class this repository manages.
    """

    def __init__(self, model: Type[ModelType], db: AsyncSession):
        """
        Args:
            model: The SQLAlchemy model class (not an instance), used to build queries.
            db: The async database session all statements run on.
        """
        self.model = model
        self.db = db

    # =================================================================================================================
    # Create
    # =================================================================================================================

    async def add(self, entity: ModelType) -> ModelType:
        """
        Add `entity` to the session and flush it so the INSERT reaches the backing store.

        Logging:
        - DEBUG: start event with model name.
        - INFO: success event with the generated id and duration_ms.

        Raises:
            DuplicateError: a unique constraint rejected the row.
            StorageError: any other storage failure.
        """
        logger.debug("repo.add.start", extra={"model": self.model.__name__, "operation": "add"})

        start = time.perf_counter()
        async with db_error_handler(self.db, self.model.__name__):
            self.db.add(entity)
            await self.db.flush()

        duration_ms = int((time.perf_counter() - start) * 1000)
        logger.info(
            "repo.add.success",
            extra={
                "model": self.model.__name__,
                "operation": "add",
                "id": getattr(entity, "id", None),
                "duration_ms": duration_ms,
            },
        )
        return entity

    # =================================================================================================================
    # Read
    # =================================================================================================================

    async def find_by_field(self, field: str, value: Any) -> ModelType | None:
        """
        Find a single entity by any column.

        The row is always re-read from storage (populate_existing), so an object cached in
        the session's identity map never hides a change made through another connection.

        Returns:
            The entity if found, None otherwise

        Raises:
            StorageError: If the field does not exist on the model or the query fails
        """
        if not hasattr(self.model, field):
            raise StorageError(f"{self.model.__name__} has no field '{field}'")

        async with db_error_handler(self.db, self.model.__name__):
            query = (
                select(self.model)
                .where(getattr(self.model, field) == value)
                .limit(1)
                .execution_options(populate_existing=True)
            )
            result = await self.db.execute(query)
            entity = result.scalars().first()

        logger.debug(
            "repo.find.%s", "hit" if entity is not None else "miss",
            extra={"model": self.model.__name__, "field": field},
        )
        return entity

    # =================================================================================================================
    # Delete
    # =================================================================================================================

    async def delete_by_field(self, field: str, value: Any) -> int:
        """
        Delete every entity whose `field` equals `value`.

        Returns:
            Number of rows removed (0 when nothing matched).
        """
        if not hasattr(self.model, field):
            raise StorageError(f"{self.model.__name__} has no field '{field}'")

        async with db_error_handler(self.db, self.model.__name__):
            stmt = delete(self.model).where(getattr(self.model, field) == value)
            result = await self.db.execute(stmt)

        removed = result.rowcount or 0
        if removed:
            logger.debug("repo.delete.success", extra={"model": self.model.__name__, "removed": removed})
        else:
            logger.debug("repo.delete.nothing_to_delete", extra={"model": self.model.__name__, "field": field})
        return removed
