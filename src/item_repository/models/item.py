from enum import IntEnum

from sqlalchemy import Integer, SmallInteger, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from item_repository.database.base import Base
from item_repository.exceptions.base import InvalidKindError


class ItemKind(IntEnum):
    """
    Closed set of content formats an item can be registered with.

    The integer values are what gets persisted in `items.kind`.
    """

    STRUCTURED_DATA = 1  # JSON document
    MARKUP = 2           # XML document

    @classmethod
    def coerce(cls, value: "ItemKind | int") -> "ItemKind":
        """
        Return the ItemKind for `value` (a member or its integer value).

        Raises:
            InvalidKindError: for anything outside the enumeration, including bools
                and strings such as "1".
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidKindError(value)
        try:
            return cls(value)
        except ValueError:
            raise InvalidKindError(value) from None


class Item(Base):
    """
    SQLAlchemy model for a registered item.

    Rows are written once and never updated; a different payload under the same
    name requires a deregister followed by a new register.
    """
    __tablename__ = "items"

    # Surrogate key assigned by the backing store
    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True
    )

    # Lookup key. The unique index backs up the engine's own existence check.
    name: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False
    )

    # Stored verbatim, never reformatted
    content: Mapped[str | None] = mapped_column(
        Text,
        nullable=True
    )

    # ItemKind value; kept as a plain small int so rows written by other tools still load
    kind: Mapped[int] = mapped_column(
        SmallInteger,
        nullable=False
    )

    def __repr__(self) -> str:
        # content omitted, payloads can be large
        return f"<Item(id={self.id!r}, name={self.name!r}, kind={self.kind!r})>"
