"""
Item store: the persistence boundary used by the Repository engine.

Extends BaseRepository with name-based lookup/delete and owns schema bootstrap for
the `items` table. No method commits; the engine wraps every call in its own unit
of work.
"""

import logging

from sqlalchemy import inspect
from sqlalchemy.exc import OperationalError, ProgrammingError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from item_repository.exceptions.mapper import db_error_handler
from item_repository.models.item import Item
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


def _create_items_table(sync_session: Session) -> bool:
    """
    Create `items` (with its indexes) unless it already exists.

    Runs inside AsyncSession.run_sync, i.e. with the sync Session API.
    Returns True when the table was created by this call.
    """
    connection = sync_session.connection()
    if inspect(connection).has_table(Item.__tablename__):
        return False
    Item.__table__.create(bind=connection)
    return True


def _is_already_exists(exc: Exception) -> bool:
    # SQLite: 'table items already exists'; Postgres: 'relation "items" already exists'
    return "already exists" in str(getattr(exc, "orig", None) or exc).lower()


class ItemStore(BaseRepository[Item]):
    """
    Repository for Item rows.

    Uniqueness of `name` is the engine's responsibility (check-then-insert under its
    lock); the unique index on the table only catches writers outside this process.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Item, db)

    # =================================================================================================================
    # Schema
    # =================================================================================================================

    async def ensure_schema(self) -> bool:
        """
        Create the backing table if it does not exist yet.

        Check-or-create is a single recoverable step: if another connection creates the
        table between our check and our CREATE, the resulting "already exists" error is
        treated as success.

        Returns:
            True if this call created the table, False if it was already there.

        Raises:
            StorageError: the store is unreachable or the table could not be created.
        """
        async with db_error_handler(self.db, "Item"):
            try:
                created = await self.db.run_sync(_create_items_table)
            except (OperationalError, ProgrammingError) as exc:
                if not _is_already_exists(exc):
                    raise
                await self.db.rollback()
                logger.info("store.schema.created_concurrently", extra={"table": Item.__tablename__})
                return False

        if created:
            logger.info("store.schema.created", extra={"table": Item.__tablename__})
        else:
            logger.debug("store.schema.exists", extra={"table": Item.__tablename__})
        return created

    # =================================================================================================================
    # Items
    # =================================================================================================================

    async def find_by_name(self, name: str) -> Item | None:
        """
        Get the item registered under `name`, or None.
        """
        return await self.find_by_field("name", name)

    async def insert(self, item: Item) -> Item:
        """
        Insert a new item row (flushed, not committed).

        Raises:
            DuplicateError: the unique index on `name` rejected the row.
            StorageError: any other write failure.
        """
        return await self.add(item)

    async def delete_by_name(self, name: str) -> int:
        """
        Delete the item registered under `name`.

        Returns:
            Removed-count: 1 if the item existed, 0 otherwise.
        """
        return await self.delete_by_field("name", name)
