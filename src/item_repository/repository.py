"""
Repository engine: register, retrieve and deregister named JSON / XML items.

    async with Repository() as repo:
        await repo.register("config", '{"debug": true}', ItemKind.STRUCTURED_DATA)
        await repo.retrieve("config")   # '{"debug": true}'
        await repo.get_kind("config")   # ItemKind.STRUCTURED_DATA
        await repo.deregister("config")

Rules enforced here:
  - first write wins: registering an existing name is a silent no-op
  - content is validated against its kind before anything is written
  - the schema is created lazily, once per instance, before the first operation
  - absence is never an error: retrieve/get_kind return None, deregister does nothing

Each instance owns one long-lived AsyncSession. All work on it is serialized by an
asyncio.Lock, which also makes register's check-then-insert atomic for this instance.
Writers in other processes are caught by the unique index on `items.name`.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from item_repository.config.settings import Settings, get_settings
from item_repository.core.logging.filters import operation_scope
from item_repository.database.session import create_engine, create_session_factory
from item_repository.exceptions.base import DuplicateError, InvalidContentError, InvalidKindError, StorageError
from item_repository.exceptions.mapper import db_error_handler
from item_repository.models.item import Item, ItemKind
from item_repository.repositories.item_store import ItemStore
from item_repository.validators.formats import validate_content

logger = logging.getLogger(__name__)


class Repository:
    """
    Persistent store of named items, each holding JSON or XML content.

    Args:
        settings: configuration; defaults to `get_settings()`.
        database_url: SQLAlchemy async URL overriding `settings.EFFECTIVE_DATABASE_URL`.
        engine: an existing AsyncEngine. The caller keeps ownership (close() won't dispose it).
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        database_url: str | None = None,
        engine: AsyncEngine | None = None,
    ):
        self.settings = settings or get_settings()

        if engine is not None:
            self._engine = engine
            self._owns_engine = False
        else:
            self._engine = create_engine(database_url or self.settings.EFFECTIVE_DATABASE_URL, self.settings)
            self._owns_engine = True

        self._session: AsyncSession = create_session_factory(self._engine)()
        self._store = ItemStore(self._session)

        # one-time initialization guard, owned by this instance
        self._initialized = False
        self._init_lock = asyncio.Lock()
        # serializes every unit of work on the shared session
        self._session_lock = asyncio.Lock()

    @property
    def initialized(self) -> bool:
        return self._initialized

    # =================================================================================================================
    # Lifecycle
    # =================================================================================================================

    async def initialize(self) -> None:
        """
        Make the repository ready for use: create the backing table if it is missing.

        Idempotent and safe to call concurrently; only the first successful call touches
        the store. On failure the instance stays uninitialized and the next call retries.

        Raises:
            StorageError: the backing store is unreachable or the table cannot be created.
        """
        if self._initialized:
            return

        with operation_scope():
            async with self._init_lock:
                if self._initialized:
                    return
                try:
                    async with self._unit_of_work() as store:
                        created = await store.ensure_schema()
                except StorageError:
                    logger.error("repository.initialize.failed", exc_info=True)
                    raise
                self._initialized = True
                logger.info("repository.initialize.done", extra={"schema_created": created})

    async def close(self) -> None:
        """
        Release the session (and the engine, when this instance created it).
        """
        await self._session.close()
        if self._owns_engine:
            await self._engine.dispose()
        logger.debug("repository.closed")

    async def __aenter__(self) -> "Repository":
        try:
            await self.initialize()
        except BaseException:
            await self.close()
            raise
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # =================================================================================================================
    # Public operations
    # =================================================================================================================

    async def register(self, name: str, content: str, kind: ItemKind | int) -> None:
        """
        Store `content` under `name`, unless `name` is already taken.

        Order of checks:
          1. kind must be an ItemKind (or its int value), else InvalidKindError
          2. an existing item under `name` makes the call a silent no-op
          3. content must parse as `kind`, else InvalidContentError
          4. the item is inserted and committed as one transaction

        Raises:
            InvalidKindError: kind outside {STRUCTURED_DATA, MARKUP}; nothing written.
            InvalidContentError: content not well-formed for kind; nothing written.
            StorageError: the backing store failed.
        """
        with operation_scope():
            try:
                item_kind = ItemKind.coerce(kind)
            except InvalidKindError:
                logger.info("repository.register.invalid_kind", extra={"item_name": name, "kind": repr(kind)})
                raise
            await self.initialize()

            async with self._unit_of_work() as store:
                if await store.find_by_name(name) is not None:
                    logger.info("repository.register.exists", extra={"item_name": name})
                    return

                try:
                    validate_content(item_kind, content)
                except InvalidContentError as exc:
                    logger.info(
                        "repository.register.invalid_content",
                        extra={"item_name": name, "kind": item_kind.name, "diagnostic": exc.diagnostic},
                    )
                    raise

                try:
                    await store.insert(Item(name=name, content=content, kind=int(item_kind)))
                except DuplicateError:
                    # another process registered the same name between our check and insert
                    logger.info("repository.register.lost_race", extra={"item_name": name})
                    return

            logger.info(
                "repository.register.created",
                extra={"item_name": name, "kind": item_kind.name, "content_length": len(content)},
            )

    async def retrieve(self, name: str) -> str | None:
        """
        Return the content stored under `name`, or None if there is no such item.
        """
        with operation_scope():
            await self.initialize()
            async with self._unit_of_work() as store:
                item = await store.find_by_name(name)
            return item.content if item is not None else None

    async def get_kind(self, name: str) -> ItemKind | None:
        """
        Return the kind of the item stored under `name`, or None if there is no such item.

        Raises:
            StorageError: the stored kind is not a known ItemKind (row written by another tool).
        """
        with operation_scope():
            await self.initialize()
            async with self._unit_of_work() as store:
                item = await store.find_by_name(name)
            if item is None:
                return None
            try:
                return ItemKind(item.kind)
            except ValueError as exc:
                logger.error("repository.get_kind.unrecognized", extra={"item_name": name, "stored_kind": item.kind})
                raise StorageError(f"Item {name!r} has unrecognized stored kind {item.kind!r}",
                                   fields=["kind"]) from exc

    async def deregister(self, name: str) -> None:
        """
        Remove the item stored under `name`. Does nothing if there is no such item.
        """
        with operation_scope():
            await self.initialize()
            async with self._unit_of_work() as store:
                removed = await store.delete_by_name(name)
            if removed:
                logger.info("repository.deregister.removed", extra={"item_name": name})
            else:
                logger.debug("repository.deregister.absent", extra={"item_name": name})

    # =================================================================================================================
    # Internals
    # =================================================================================================================

    @asynccontextmanager
    async def _unit_of_work(self) -> AsyncIterator[ItemStore]:
        """
        One transaction on the shared session, under the session lock.

        Commits when the block exits normally (including an early `return`), rolls back
        when it raises. Store methods already roll back on storage errors; the rollback
        here covers validation errors raised mid-block.
        """
        async with self._session_lock:
            try:
                yield self._store
            except BaseException:
                await self._session.rollback()
                raise
            async with db_error_handler(self._session, "Item"):
                await self._session.commit()
