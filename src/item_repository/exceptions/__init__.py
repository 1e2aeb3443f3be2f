# item_repository/
# │
# ├── exceptions/
# │   ├── __init__.py
# │   ├── base.py                    # Public errors (InvalidKindError, InvalidContentError, StorageError, ...)
# │   ├── integrity_classifier.py    # SQL-level / DB-specific classification
# │   └── mapper.py                  # Map DB errors to public errors, db_error_handler()

from .base import (
    RepositoryError,
    InvalidKindError,
    InvalidContentError,
    StorageError,
    DuplicateError,
)

__all__ = [
    "RepositoryError",
    "InvalidKindError",
    "InvalidContentError",
    "StorageError",
    "DuplicateError",
]
