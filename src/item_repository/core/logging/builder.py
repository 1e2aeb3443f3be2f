# src/item_repository/core/logging/builder.py
"""
Logging builder: create and apply a dictConfig logging configuration.

 - make_dict_config(settings) builds the dictConfig mapping
 - setup_logging(settings) applies it (creating LOG_DIR when file logging is on)

Handler selection:
| `LOG_TO_STDOUT` | `LOG_DIR` set  | Active handlers                 |
| --------------- | -------------- | ------------------------------- |
| true            | doesn't matter | console + error_console         |
| false           | no             | console + error_console         |
| false           | yes            | console + file + error_file     |

Settings are passed in rather than read here so that importing this module has no
side effects and tests can hand in a lightweight settings object.
"""

from __future__ import annotations

from pathlib import Path
import logging
import logging.config

from .formatters import JsonFormatter, ColorFormatter
from .filters import OperationIdFilter, ContentRedactFilter
from .handlers import (
    get_console_handler,
    get_file_handler,
    get_error_file_handler,
    get_error_console_handler,
)

from item_repository.config.settings import Settings

# Package logger name; library modules log under "item_repository.*".
PACKAGE_LOGGER = "item_repository"


def _file_logging_enabled(settings: Settings) -> bool:
    return (not settings.LOG_TO_STDOUT) and bool(settings.LOG_DIR)


def make_dict_config(settings: Settings) -> dict:
    """
    Build the dictConfig mapping using the provided settings.

    The returned mapping includes:
      - formatters: "standard" (color or plain text) and "json"
      - filters: "operation_id", "redact"
      - handlers: console, plus (file, error_file) OR error_console
      - loggers: root, item_repository, sqlalchemy.engine, aiosqlite
    """
    formatters = {
        "standard": {
            "()": ColorFormatter,
            "format": "%(asctime)s | %(levelname)s | %(name)s | %(operation_id)s | %(message)s",
        },
        "json": {
            "()": JsonFormatter,
            "env": settings.ENV,
            "service": getattr(settings, "SERVICE_NAME", "item-repository"),
        },
    }

    filters = {
        "operation_id": {"()": OperationIdFilter},
        "redact": {"()": ContentRedactFilter},
    }

    handlers: dict[str, dict] = {"console": get_console_handler(settings)}

    if _file_logging_enabled(settings):
        handlers["file"] = get_file_handler(settings)
        handlers["error_file"] = get_error_file_handler(settings)
    else:
        handlers["error_console"] = get_error_console_handler(settings)

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "filters": filters,
        "handlers": handlers,
        "loggers": {
            "": {
                "handlers": list(handlers.keys()),
                "level": settings.LOG_LEVEL,
                "propagate": True,
            },
            PACKAGE_LOGGER: {
                "level": settings.LOG_LEVEL,
                "propagate": True,
            },
            # SQL logging may contain item payloads as bound parameters
            "sqlalchemy.engine": {
                "level": "DEBUG" if settings.ENABLE_SQL_LOGGING else "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
            "aiosqlite": {
                "level": "WARNING",
                "propagate": True,
            },
        },
    }


def setup_logging(settings: Settings) -> None:
    """
    Initialize logging from settings.

    Steps:
      1. Ensure LOG_DIR exists when writing files.
      2. Apply dictConfig(make_dict_config(settings)).
      3. Attach an OperationIdFilter to the root logger as a safety net, so records that
         reach handlers added later (e.g. pytest's caplog) still carry operation_id.
    """
    if _file_logging_enabled(settings):
        Path(settings.LOG_DIR).mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(make_dict_config(settings))

    logging.getLogger().addFilter(OperationIdFilter())
