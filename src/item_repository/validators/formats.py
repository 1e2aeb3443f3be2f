"""
Format validators for item content.

Each validator takes the raw text payload and either returns None (well-formed) or
raises InvalidContentError carrying the parser's own diagnostic message. They are
pure: no I/O, no shared state, same input -> same outcome.

Dispatch is a plain lookup table keyed by ItemKind, so supporting another format is
one new enum member plus one entry in VALIDATORS.
"""

import json
import xml.etree.ElementTree as ET
from typing import Callable

from item_repository.exceptions.base import InvalidContentError
from item_repository.models.item import ItemKind


def validate_structured_data(content: str) -> None:
    """Accept any well-formed JSON document (object, array or scalar)."""
    try:
        json.loads(content)
    except ValueError as exc:  # json.JSONDecodeError is a ValueError
        raise InvalidContentError(ItemKind.STRUCTURED_DATA, str(exc)) from exc


def validate_markup(content: str) -> None:
    """Accept any well-formed XML document (single root, balanced and properly nested tags)."""
    try:
        ET.fromstring(content)
    except (ET.ParseError, ValueError) as exc:  # ValueError: unencodable text, e.g. lone surrogates
        raise InvalidContentError(ItemKind.MARKUP, str(exc)) from exc


VALIDATORS: dict[ItemKind, Callable[[str], None]] = {
    ItemKind.STRUCTURED_DATA: validate_structured_data,
    ItemKind.MARKUP: validate_markup,
}


def validate_content(kind: ItemKind, content: str) -> None:
    """
    Validate `content` against `kind`.

    Raises:
        InvalidContentError: if content is not a string or fails to parse.
    """
    if not isinstance(content, str):
        raise InvalidContentError(kind, f"content must be a string, got {type(content).__name__}")
    try:
        content.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise InvalidContentError(kind, f"content is not valid UTF-8 text: {exc.reason} at position {exc.start}") from exc
    VALIDATORS[kind](content)


def is_well_formed(kind: ItemKind, content: str) -> bool:
    try:
        validate_content(kind, content)
    except InvalidContentError:
        return False
    return True
