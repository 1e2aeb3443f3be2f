"""
Logging filters

Operation ID filter and helpers, plus content redaction.

Every public Repository call runs inside `operation_scope()`, which stores a short
correlation id in a ContextVar. `OperationIdFilter` copies it onto each LogRecord so
all lines emitted while serving one register/retrieve/... call can be grouped, even
when many calls are interleaved on the same event loop (a ContextVar follows the
asyncio task, a thread-local would not).

Records logged outside any operation get the sentinel "-", so formatters that
reference `%(operation_id)s` never raise KeyError.
"""

import logging
import uuid
from contextlib import contextmanager
from logging import LogRecord
import contextvars
from typing import Iterator

_operation_id_ctx: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "operation_id", default=None
)


def set_operation_id(operation_id: str | None):
    """
    Set the operation id in the current context.

    Returns:
        token: contextvars.Token which can be passed to reset_operation_id(token)
    """
    return _operation_id_ctx.set(operation_id)


def reset_operation_id(token) -> None:
    _operation_id_ctx.reset(token)


def get_operation_id() -> str | None:
    return _operation_id_ctx.get()


def new_operation_id() -> str:
    return uuid.uuid4().hex[:12]


@contextmanager
def operation_scope() -> Iterator[str]:
    """
    Run a block under an operation id.

    Nested scopes reuse the outer id (an operation that calls initialize() keeps one id).
    """
    current = get_operation_id()
    if current is not None:
        yield current
        return

    token = set_operation_id(new_operation_id())
    try:
        yield get_operation_id()
    finally:
        reset_operation_id(token)


class OperationIdFilter(logging.Filter):
    """
    Guarantee every LogRecord has an `operation_id` attribute.

    Precedence: an explicit `extra={"operation_id": ...}`, then the ContextVar, then "-".
    Always returns True; the filter only annotates.
    """

    def filter(self, record: LogRecord) -> bool:
        record.operation_id = (
            getattr(record, "operation_id", None) or get_operation_id() or "-"
        )
        return True


class ContentRedactFilter(logging.Filter):
    """
    Keep item bodies out of log sinks.

    Any payload-like attribute attached via `extra` is replaced with a length summary,
    e.g. `<redacted 1532 chars>`.
    """

    SENSITIVE = {"content", "item_content", "payload"}

    def filter(self, record: LogRecord) -> bool:
        for key in list(record.__dict__.keys()):
            if key.lower() in self.SENSITIVE:
                value = record.__dict__[key]
                # already redacted by a filter on an earlier handler
                if isinstance(value, str) and value.startswith("<redacted "):
                    continue
                size = len(value) if hasattr(value, "__len__") else 0
                record.__dict__[key] = f"<redacted {size} chars>"
        return True
