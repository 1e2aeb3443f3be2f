"""
Repository layer: data-access classes over the async SQLAlchemy session.

Usage:
    from item_repository.repositories import ItemStore
"""

from .base_repository import BaseRepository
from .item_store import ItemStore

__all__ = [
    "BaseRepository",
    "ItemStore",
]
