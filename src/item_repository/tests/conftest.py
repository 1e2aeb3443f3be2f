"""
Core pytest configuration for the whole test suite.

Only the essentials live here: noisy-logger tuning, logging setup, and the import of
shared fixtures from tests/test_fixtures/. Every test gets its own SQLite file under
pytest's tmp_path, so tests never share state and need no cleanup.
"""

from __future__ import annotations

import logging

# -------------------------------
# Early logging tuning
# -------------------------------
# Keep this block above the item_repository imports so library loggers are quiet
# from collection onwards.
NOISY_LOGGERS = (
    "sqlalchemy",
    "sqlalchemy.engine",
    "sqlalchemy.engine.Engine",
    "aiosqlite",
    "asyncio",
)
for _name in NOISY_LOGGERS:
    logging.getLogger(_name).setLevel(logging.WARNING)

import pytest

from item_repository.config.settings import Settings
from item_repository.core.logging.builder import setup_logging


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings used by the suite: text logs to the console, DEBUG level, no .env lookup.
    """
    return Settings(
        _env_file=None,
        ENV="testing",
        TESTING=True,
        LOG_LEVEL="DEBUG",
        LOG_FORMAT="text",
        LOG_TO_STDOUT=True,
    )


@pytest.fixture(scope="session", autouse=True)
def configure_logging(test_settings: Settings):
    """
    Install the application logging config once for the session.

    caplog keeps working: pytest attaches its capture handler to the root logger per test,
    after this dictConfig has run.
    """
    setup_logging(test_settings)
    yield


# Repository test fixtures
from .test_fixtures.repository_fixtures import (  # noqa: E402,F401
    database_url,
    async_engine,
    db_session,
    item_store,
    repository,
    sample_items,
)
