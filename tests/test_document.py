"""Tests for document assembly and conversion."""

import pytest
import tantivy

from tanlua.bindings import (
    FAST,
    INT_INDEXED,
    STORED,
    TEXT,
    Document,
    FieldHandle,
    FieldKind,
    Schema,
    SchemaBuilder,
)
from tanlua.errors import DocumentRejectedError, InvalidArgumentError


@pytest.fixture
def mixed_schema() -> Schema:
    builder = SchemaBuilder()
    builder.add_text_field("title", [TEXT, STORED])
    builder.add_u64_field("views", [INT_INDEXED])
    builder.add_i64_field("delta", [FAST])
    builder.add_facet_field("category")
    builder.add_bytes_field("payload")
    return builder.build()


def test_new_document_is_empty():
    doc = Document()
    assert len(doc) == 0
    assert doc.values == ()


def test_fields_accept_multiple_values(article_schema: Schema):
    title = article_schema.get_field("title")
    doc = Document()
    doc.add_text(title, "first")
    doc.add_text(title, "second")

    assert doc.values == ((title, "first"), (title, "second"))


def test_all_value_kinds_convert(mixed_schema: Schema):
    doc = Document()
    doc.add_text(mixed_schema.get_field("title"), "Lorem ipsum")
    doc.add_u64(mixed_schema.get_field("views"), 42)
    doc.add_i64(mixed_schema.get_field("delta"), -7)
    doc.add_facet(mixed_schema.get_field("category"), "/news/local")
    doc.add_bytes(mixed_schema.get_field("payload"), "raw")

    native = doc.to_native(mixed_schema)

    assert isinstance(native, tantivy.Document)
    assert len(doc) == 5


def test_integral_float_accepted_for_integers(mixed_schema: Schema):
    doc = Document()
    doc.add_u64(mixed_schema.get_field("views"), 3.0)
    assert doc.values[0][1] == 3


@pytest.mark.parametrize(
    ("method", "value"),
    [
        ("add_text", 12),
        ("add_u64", -1),
        ("add_u64", 1.5),
        ("add_u64", True),
        ("add_i64", 2**63),
        ("add_facet", "no-leading-slash"),
        ("add_bytes", 3),
    ],
)
def test_invalid_values_rejected(mixed_schema: Schema, method: str, value):
    doc = Document()
    handle = mixed_schema.get_field("title")

    with pytest.raises(InvalidArgumentError):
        getattr(doc, method)(handle, value)


def test_missing_field_handle_rejected(article_schema: Schema):
    doc = Document()

    with pytest.raises(InvalidArgumentError, match="nil"):
        doc.add_text(article_schema.get_field("nonexistent"), "value")


def test_kind_mismatch_names_field(mixed_schema: Schema):
    doc = Document()
    doc.add_u64(mixed_schema.get_field("title"), 5)

    with pytest.raises(DocumentRejectedError) as excinfo:
        doc.to_native(mixed_schema)

    assert excinfo.value.field == "title"


def test_unknown_field_rejected(article_schema: Schema):
    doc = Document()
    doc.add_text(FieldHandle(7, "summary", FieldKind.TEXT), "elsewhere")

    with pytest.raises(DocumentRejectedError, match="not declared") as excinfo:
        doc.to_native(article_schema)

    assert excinfo.value.field == "summary"


def test_conversion_snapshots_values(article_schema: Schema):
    title = article_schema.get_field("title")
    doc = Document()
    doc.add_text(title, "before")
    doc.to_native(article_schema)

    doc.add_text(title, "after")

    assert len(doc) == 2


def test_lua_strings_decode_for_text_and_pass_through_for_bytes(mixed_schema: Schema):
    doc = Document()
    doc.add_text(mixed_schema.get_field("title"), "café".encode())
    doc.add_facet(mixed_schema.get_field("category"), b"/news/local")
    doc.add_bytes(mixed_schema.get_field("payload"), b"\xff\x00\x80")

    assert [value for _, value in doc.values] == ["café", "/news/local", b"\xff\x00\x80"]
    assert isinstance(doc.to_native(mixed_schema), tantivy.Document)


@pytest.mark.parametrize("method", ["add_text", "add_facet"])
def test_invalid_utf8_text_rejected(mixed_schema: Schema, method: str):
    doc = Document()

    with pytest.raises(InvalidArgumentError, match="UTF-8"):
        getattr(doc, method)(mixed_schema.get_field("title"), b"/\xff\xfe")

    assert len(doc) == 0
