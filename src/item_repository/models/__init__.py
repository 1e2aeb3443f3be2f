"""
Database models for the item repository.

    from item_repository.models import Item, ItemKind
"""

from .item import Item, ItemKind

__all__ = [
    "Item",
    "ItemKind",
]
