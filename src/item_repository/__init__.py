"""
item_repository: a persistent, name-addressed store for validated JSON and XML documents.

    from item_repository import Repository, ItemKind

    async with Repository() as repo:
        await repo.register("feed", "<rss/>", ItemKind.MARKUP)
"""

from .exceptions import (
    RepositoryError,
    InvalidKindError,
    InvalidContentError,
    StorageError,
    DuplicateError,
)
from .models.item import ItemKind
from .repository import Repository

__all__ = [
    "Repository",
    "ItemKind",
    "RepositoryError",
    "InvalidKindError",
    "InvalidContentError",
    "StorageError",
    "DuplicateError",
]
