import pytest

from item_repository.exceptions.base import InvalidContentError, InvalidKindError
from item_repository.models.item import ItemKind
from item_repository.validators.formats import (
    VALIDATORS,
    is_well_formed,
    validate_content,
    validate_markup,
    validate_structured_data,
)


class TestStructuredDataValidator:

    @pytest.mark.parametrize("content", [
        "{}",
        "[]",
        '{"k": "v", "n": [1, 2.5, null, true]}',
        "42",
        '"just a string"',
        "  {\"padded\": 1}\n",
    ])
    def test_accepts_well_formed_json(self, content):
        assert validate_structured_data(content) is None

    @pytest.mark.parametrize("content", ["", "   ", "{", '{"a": }', "{'a': 1}", "<a/>", "[1,]"])
    def test_rejects_malformed_json_with_diagnostic(self, content):
        with pytest.raises(InvalidContentError) as exc_info:
            validate_structured_data(content)

        err = exc_info.value
        assert err.kind is ItemKind.STRUCTURED_DATA
        assert err.error_code == "invalid_content"
        assert err.diagnostic
        assert err.diagnostic in err.message


class TestMarkupValidator:

    @pytest.mark.parametrize("content", [
        "<a/>",
        "<root><child attr='1'>text</child></root>",
        '<?xml version="1.0" encoding="UTF-8"?><doc/>',
        "<ns:a xmlns:ns='urn:x'><ns:b/></ns:a>",
    ])
    def test_accepts_well_formed_xml(self, content):
        assert validate_markup(content) is None

    @pytest.mark.parametrize("content", [
        "",
        "not xml",
        "<a>",
        "<a><b></a></b>",
        "<a/><b/>",
        '{"k": "v"}',
    ])
    def test_rejects_malformed_xml_with_diagnostic(self, content):
        with pytest.raises(InvalidContentError) as exc_info:
            validate_markup(content)

        assert exc_info.value.kind is ItemKind.MARKUP
        assert exc_info.value.diagnostic


class TestDispatch:

    def test_every_kind_has_a_validator(self):
        assert set(VALIDATORS) == set(ItemKind)

    def test_validate_content_dispatches_by_kind(self):
        validate_content(ItemKind.STRUCTURED_DATA, "{}")
        validate_content(ItemKind.MARKUP, "<a/>")

        with pytest.raises(InvalidContentError):
            validate_content(ItemKind.MARKUP, "{}")
        with pytest.raises(InvalidContentError):
            validate_content(ItemKind.STRUCTURED_DATA, "<a/>")

    @pytest.mark.parametrize("content", [None, b"{}", 42])
    def test_non_string_content_is_rejected(self, content):
        with pytest.raises(InvalidContentError) as exc_info:
            validate_content(ItemKind.STRUCTURED_DATA, content)

        assert "must be a string" in exc_info.value.diagnostic

    @pytest.mark.parametrize("kind, content", [
        (ItemKind.STRUCTURED_DATA, '"\ud800"'),
        (ItemKind.MARKUP, "<a>\ud800</a>"),
    ])
    def test_unencodable_text_is_rejected(self, kind, content):
        with pytest.raises(InvalidContentError) as exc_info:
            validate_content(kind, content)

        assert exc_info.value.kind is kind
        assert "UTF-8" in exc_info.value.diagnostic

    def test_markup_parser_unicode_errors_become_invalid_content(self):
        # the parser itself rejects lone surrogates with a UnicodeEncodeError
        with pytest.raises(InvalidContentError) as exc_info:
            validate_markup("<a>\udfff</a>")

        assert exc_info.value.kind is ItemKind.MARKUP

    def test_is_well_formed_is_deterministic(self):
        results = {is_well_formed(ItemKind.MARKUP, "<a><b/></a>") for _ in range(5)}
        assert results == {True}
        assert is_well_formed(ItemKind.MARKUP, "<a>") is False


class TestItemKindCoerce:

    def test_accepts_members_and_their_values(self):
        assert ItemKind.coerce(ItemKind.MARKUP) is ItemKind.MARKUP
        assert ItemKind.coerce(1) is ItemKind.STRUCTURED_DATA
        assert ItemKind.coerce(2) is ItemKind.MARKUP

    @pytest.mark.parametrize("value", [0, 3, -1, 99, True, False, "1", "MARKUP", None, 2.0])
    def test_rejects_everything_else(self, value):
        with pytest.raises(InvalidKindError) as exc_info:
            ItemKind.coerce(value)

        assert exc_info.value.kind == value
        assert exc_info.value.fields == ["kind"]
        # still a ValueError for callers that only know the builtin
        assert isinstance(exc_info.value, ValueError)
