"""
Custom exceptions for item repository operations.
"""

from typing import Any, Iterable

# canonical repository-level exception

class RepositoryError(Exception):
    """
    Base exception for repository errors.

    - message: human-friendly message
    - fields: optional list of field names related to the error (e.g., ['name'])
    - constraint: optional DB constraint name or identifier (for logs only)
    - error_code: canonical short code (e.g., 'invalid_kind', 'storage') callers can switch on
    """

    def __init__(self, message: str, *, fields: Iterable[str] | None = None,
                 constraint: str | None = None, error_code: str | None = None):
        super().__init__(message)
        self.message = message
        self.fields = list(fields) if fields else None
        self.constraint = constraint
        self.error_code = error_code

    def __str__(self) -> str:
        base = self.message
        parts = []
        if self.fields:
            parts.append(f"fields: {', '.join(self.fields)}")
        if self.constraint:
            parts.append(f"constraint: {self.constraint}")
        if self.error_code:
            parts.append(f"code: {self.error_code}")
        if parts:
            return f"{base} ({'; '.join(parts)})"
        return base

    def to_payload(self) -> dict:
        """
        Return a JSON-serializable dict describing the error.
        Standard shape:
            {
                "detail": "A human-friendly message",
                "code": "invalid_content",     # optional canonical code
                "fields": ["content"],         # optional
            }
        The constraint name is left out; it is for logs only.
        """
        payload = {"detail": self.message}
        if self.error_code:
            payload["code"] = self.error_code
        if self.fields:
            payload["fields"] = list(self.fields)
        return payload


# -----------------------
# Validation errors (local, non-retryable: the caller must fix the input)
# -----------------------

class InvalidKindError(RepositoryError, ValueError):
    """Raised when an item kind is outside the closed ItemKind enumeration."""

    def __init__(self, kind: Any):
        super().__init__(
            f"Invalid item kind {kind!r}. Kind should be 1 (structured data) or 2 (markup).",
            fields=["kind"],
            error_code="invalid_kind",
        )
        self.kind = kind


class InvalidContentError(RepositoryError, ValueError):
    """
    Raised when content is not well-formed for its declared kind.

    `diagnostic` holds the underlying parser's message verbatim.
    """

    def __init__(self, kind: Any, diagnostic: str):
        label = getattr(kind, "name", kind)
        super().__init__(
            f"Invalid {label} content: {diagnostic}",
            fields=["content"],
            error_code="invalid_content",
        )
        self.kind = kind
        self.diagnostic = diagnostic


# -----------------------
# Storage errors (may be transient; the underlying cause is chained via __cause__)
# -----------------------

class StorageError(RepositoryError):
    def __init__(self, message: str, *, fields: Iterable[str] | None = None,
                 constraint: str | None = None, error_code: str = "storage"):
        super().__init__(message, fields=fields, constraint=constraint, error_code=error_code)


class DuplicateError(StorageError):
    """Raised when the backing store rejects a write because of a unique constraint."""

    def __init__(self, message: str, *, fields: Iterable[str] | None = None, constraint: str | None = None):
        super().__init__(message, fields=fields, constraint=constraint, error_code="duplicate")


__all__ = [
    "RepositoryError",
    "InvalidKindError",
    "InvalidContentError",
    "StorageError",
    "DuplicateError",
]
