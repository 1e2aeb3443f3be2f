from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from pathlib import Path
from typing import Literal
from functools import lru_cache


class Settings(BaseSettings):
    """
    Repository settings loaded from the environment (and an optional .env file).
    """

    # Environment
    ENV: Literal["development", "testing", "staging", "production"] = "development"

    # Backing store
    # Any SQLAlchemy async URL works; the default is a local SQLite file.
    DATABASE_URL: str = "sqlite+aiosqlite:///./item_repository.db"

    # Test database configuration
    TEST_DATABASE_URL: str | None = None
    TESTING: bool = False

    # SQLAlchemy
    SQLALCHEMY_ECHO: bool = False
    DB_POOL_PRE_PING: bool = True

    # Logging
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    LOG_FORMAT: Literal["json", "text"] = "json"
    LOG_TO_STDOUT: bool = True
    LOG_DIR: Path = Path("./logs")
    LOG_MAX_BYTES: int = 10_000_000  # 10 MB
    LOG_BACKUP_COUNT: int = 5
    ENABLE_SQL_LOGGING: bool = False
    SERVICE_NAME: str = "item-repository"

    # --- Derived settings ---
    @property
    def EFFECTIVE_DATABASE_URL(self) -> str:
        """
        Return the database URL the repository should connect to.

        When `TESTING=True` and `TEST_DATABASE_URL` is provided, the test URL wins so
        test runs never touch the regular store. Otherwise `DATABASE_URL` is used.
        """
        if self.TESTING and self.TEST_DATABASE_URL:
            return self.TEST_DATABASE_URL
        return self.DATABASE_URL

    # --- Validators ---
    @field_validator("LOG_LEVEL", mode="before")
    def normalize_log_level(cls, v: str | None) -> str | None:
        """
        Upper-case LOG_LEVEL before Literal validation, so `LOG_LEVEL=debug` is accepted.
        """
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("LOG_FORMAT", mode="before")
    def normalize_log_format(cls, v: str | None) -> str | None:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    model_config = SettingsConfigDict(
        # .env next to the package root (src/item_repository/.env); missing file is ignored.
        env_file=str(Path(__file__).parent.parent / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )


# Settings come from the environment only, so one cached instance per process is enough.
@lru_cache()
def get_settings() -> Settings:
    return Settings()
