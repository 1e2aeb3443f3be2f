# src/item_repository/tests/test_logging/test_filters.py
import asyncio
import logging

from item_repository.core.logging.filters import (
    ContentRedactFilter,
    OperationIdFilter,
    get_operation_id,
    operation_scope,
    reset_operation_id,
    set_operation_id,
)


def make_record():
    return logging.LogRecord("test", logging.INFO, __file__, 1, "hello %s", ("world",), None)


def test_operation_id_filter_defaults_to_dash():
    rec = make_record()
    token = set_operation_id(None)
    try:
        f = OperationIdFilter()
        assert f.filter(rec) is True
        assert rec.operation_id == "-"
    finally:
        reset_operation_id(token)


def test_operation_id_filter_uses_contextvar():
    rec = make_record()
    token = set_operation_id("op-123")
    try:
        OperationIdFilter().filter(rec)
        assert rec.operation_id == "op-123"
    finally:
        reset_operation_id(token)


def test_operation_id_filter_respects_record_extra():
    rec = make_record()
    rec.operation_id = "explicit"
    token = set_operation_id("context-id")
    try:
        OperationIdFilter().filter(rec)
        assert rec.operation_id == "explicit"
    finally:
        reset_operation_id(token)


def test_operation_scope_sets_and_restores_id():
    assert get_operation_id() is None
    with operation_scope() as op_id:
        assert op_id and get_operation_id() == op_id
        # nested scopes keep the outer id
        with operation_scope() as inner:
            assert inner == op_id
    assert get_operation_id() is None


def test_operation_scope_is_isolated_per_task():
    async def capture():
        with operation_scope() as op_id:
            await asyncio.sleep(0)
            assert get_operation_id() == op_id
            return op_id

    async def main():
        return await asyncio.gather(capture(), capture(), capture())

    ids = asyncio.run(main())
    assert len(set(ids)) == 3


def test_content_redact_filter_replaces_payloads():
    rec = make_record()
    rec.content = '{"secret": "value"}'
    rec.item_name = "cfg"

    assert ContentRedactFilter().filter(rec) is True

    assert rec.content == "<redacted 19 chars>"
    assert rec.item_name == "cfg"


def test_content_redact_filter_is_idempotent():
    # one filter instance per handler: the same record passes through several
    rec = make_record()
    rec.content = "<secret/>"

    ContentRedactFilter().filter(rec)
    ContentRedactFilter().filter(rec)

    assert rec.content == "<redacted 9 chars>"
