from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    create_async_engine,
    async_sessionmaker,
    AsyncSession,
)

from item_repository.config.settings import Settings


def create_engine(database_url: str, settings: Settings) -> AsyncEngine:
    """
    Build the AsyncEngine for the backing store.

    No engine is created at import time: every Repository instance builds (or is handed)
    its own engine, so several instances can live side by side in one process.
    """
    return create_async_engine(
        database_url,
        echo=settings.SQLALCHEMY_ECHO,
        pool_pre_ping=settings.DB_POOL_PRE_PING,  # connection health checks
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Return an AsyncSession factory bound to `engine`.

    expire_on_commit=False keeps loaded items readable after the unit of work commits.
    """
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
