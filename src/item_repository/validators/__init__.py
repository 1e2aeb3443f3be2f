from .formats import (
    VALIDATORS,
    validate_content,
    validate_markup,
    validate_structured_data,
    is_well_formed,
)

__all__ = [
    "VALIDATORS",
    "validate_content",
    "validate_markup",
    "validate_structured_data",
    "is_well_formed",
]
