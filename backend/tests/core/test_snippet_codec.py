"""Snippet Codec — tests for export encoding and validated import decoding.

Invariants:
    - serialize -> deserialize reproduces every field (round-trip law)
    - Output is deterministic and independent of input order
    - Any invalid entry rejects the whole payload (STRUCTURAL_MISMATCH)
    - Unparseable text is MALFORMED_ENCODING
"""

import json
from dataclasses import replace

import pytest

from snipvault.core.domain_types import SCHEMA_VERSION, ValidationKind
from snipvault.core.errors import SnippetValidationError
from snipvault.core.snippet import new_snippet
from snipvault.core.snippet_codec import (
    SnippetRecord, deserialize_snippets, serialize_snippets, snippet_to_record,
)


def _snippet(snippet_id, now=1_000, **kw):
    defaults = dict(title=f"Snippet {snippet_id}", language="python", code="print('hi')")
    defaults.update(kw)
    return new_snippet(now_ms=now, snippet_id=snippet_id, **defaults)


def _entry(snippet_id="a", **overrides):
    entry = {
        "id": snippet_id, "title": "T", "language": "go", "code": "x",
        "tags": ["t"], "isFavorite": False, "createdAt": 1, "updatedAt": 2,
    }
    entry.update(overrides)
    return entry


def _rejection(text) -> SnippetValidationError:
    with pytest.raises(SnippetValidationError) as exc:
        deserialize_snippets(text)
    return exc.value


# --- Round-trip ---------------------------------------------------------------

def test_roundtrip_preserves_all_fields():
    original = [
        _snippet("a", tags=["sort", "algo"], is_favorite=True),
        replace(_snippet("b", now=2_000, code="fn main() {}\n\t// ünïcödé"), updated_at=7_500),
        _snippet("c", now=3_000, tags=[]),
    ]
    restored = deserialize_snippets(serialize_snippets(original))
    assert sorted(restored, key=lambda s: s.id) == original


def test_roundtrip_empty_collection():
    assert deserialize_snippets(serialize_snippets([])) == []


def test_roundtrip_float_timestamps():
    snippet = replace(_snippet("a"), created_at=1.5, updated_at=2.25)
    assert deserialize_snippets(serialize_snippets([snippet])) == [snippet]


# --- Encoding -----------------------------------------------------------------

def test_serialize_is_deterministic_regardless_of_order():
    a, b = _snippet("a", now=2_000), _snippet("b", now=1_000)
    assert serialize_snippets([a, b]) == serialize_snippets([b, a])


def test_serialize_envelope_shape():
    document = json.loads(serialize_snippets([_snippet("a")]))
    assert document["schemaVersion"] == SCHEMA_VERSION
    assert list(document["snippets"][0]) == [
        "id", "title", "language", "code", "tags", "isFavorite", "createdAt", "updatedAt",
    ]


def test_serialize_orders_by_created_at_then_id():
    text = serialize_snippets([_snippet("z", now=1), _snippet("b", now=2), _snippet("a", now=2)])
    assert [e["id"] for e in json.loads(text)["snippets"]] == ["z", "a", "b"]


def test_serialize_rejects_nan_timestamps():
    with pytest.raises(ValueError):
        serialize_snippets([replace(_snippet("a"), updated_at=float("nan"))])


def test_serialize_rejects_unserializable_fields():
    with pytest.raises(TypeError):
        serialize_snippets([replace(_snippet("a"), code=object())])


def test_snippet_to_record_uses_camel_case():
    record = snippet_to_record(_snippet("a", is_favorite=True))
    assert record["isFavorite"] is True
    assert record["createdAt"] == 1_000


# --- Decoding: accepted shapes ------------------------------------------------

def test_bare_array_is_accepted():
    snippets = deserialize_snippets(json.dumps([_entry("a"), _entry("b")]))
    assert [s.id for s in snippets] == ["a", "b"]
    assert snippets[0].tags == ("t",)


def test_unknown_entry_fields_are_ignored():
    snippets = deserialize_snippets(json.dumps([_entry(extra="field")]))
    assert snippets[0].id == "a"


def test_record_accepts_python_field_names():
    record = SnippetRecord.model_validate({
        "id": "a", "title": "T", "language": "go", "code": "",
        "tags": [], "is_favorite": True, "created_at": 1, "updated_at": 1,
    })
    assert record.to_snippet().is_favorite is True


# --- Decoding: malformed ------------------------------------------------------

@pytest.mark.parametrize("text", ["", "{not json", "[1, 2", "undefined"])
def test_unparseable_text_is_malformed_encoding(text):
    assert _rejection(text).kind == ValidationKind.MALFORMED_ENCODING


# --- Decoding: structural mismatch --------------------------------------------

@pytest.mark.parametrize("overrides", [
    {"id": 7},
    {"title": None},
    {"language": ["python"]},
    {"code": 1.5},
    {"tags": "sort"},
    {"tags": ["ok", 3]},
    {"isFavorite": "true"},
    {"isFavorite": 1},
    {"createdAt": "1700000000000"},
    {"updatedAt": True},
])
def test_wrongly_typed_field_is_structural_mismatch(overrides):
    error = _rejection(json.dumps([_entry(**overrides)]))
    assert error.kind == ValidationKind.STRUCTURAL_MISMATCH
    assert error.details


def test_missing_field_is_structural_mismatch():
    entry = _entry()
    del entry["tags"]
    assert _rejection(json.dumps([entry])).kind == ValidationKind.STRUCTURAL_MISMATCH


def test_one_invalid_entry_among_three_valid_rejects_all():
    payload = [_entry("a"), _entry("b"), _entry("bad", isFavorite="yes"), _entry("c")]
    error = _rejection(json.dumps(payload))
    assert error.kind == ValidationKind.STRUCTURAL_MISMATCH
    assert any("entry 2" in d for d in error.details)


@pytest.mark.parametrize("document", [
    {"snippets": "nope", "schemaVersion": SCHEMA_VERSION},
    {"schemaVersion": 99, "snippets": []},
    {"schemaVersion": True, "snippets": []},
    {"snippets": []},
    "just a string",
    42,
    None,
])
def test_wrong_top_level_shape_is_structural_mismatch(document):
    assert _rejection(json.dumps(document)).kind == ValidationKind.STRUCTURAL_MISMATCH


def test_non_object_entry_is_structural_mismatch():
    assert _rejection(json.dumps([_entry(), "x"])).kind == ValidationKind.STRUCTURAL_MISMATCH


def test_updated_before_created_is_structural_mismatch():
    error = _rejection(json.dumps([_entry(createdAt=10, updatedAt=5)]))
    assert error.kind == ValidationKind.STRUCTURAL_MISMATCH


def test_repeated_ids_are_structural_mismatch():
    error = _rejection(json.dumps([_entry("a"), _entry("a")]))
    assert error.kind == ValidationKind.STRUCTURAL_MISMATCH
    assert error.details == ["duplicate id: a"]


def test_nan_timestamp_is_rejected():
    text = '[{"id": "a", "title": "T", "language": "go", "code": "", "tags": [],' \
        ' "isFavorite": false, "createdAt": NaN, "updatedAt": NaN}]'
    assert _rejection(text).kind == ValidationKind.STRUCTURAL_MISMATCH
