"""Persistent Store Adapter — load/save outcomes over in-memory and failing media.

Invariants:
    - load(): missing -> NOT_FOUND, garbage -> CORRUPT, backend down -> UNAVAILABLE
    - save(): never raises; quota, encoding and backend failures are result values
    - A failed save leaves the previously stored value untouched
"""

import json
from dataclasses import replace

from snipvault.core.domain_types import LoadStatus, PersistenceKind, SaveStatus
from snipvault.core.snippet import new_snippet
from snipvault.core.snippet_codec import serialize_snippets
from snipvault.infrastructure.kv_medium import InMemoryKeyValueMedium
from snipvault.services.persistent_store import SnippetPersistence

from tests.services.fakes import STORE_KEY, UnavailableMedium


def _snippet(snippet_id="a", code="x = 1"):
    return new_snippet(
        title="T", language="python", code=code, now_ms=1_000, snippet_id=snippet_id,
    )


# --- load ---------------------------------------------------------------------

async def test_load_missing_key_is_not_found(persistence):
    result = await persistence.load()
    assert result.status == LoadStatus.NOT_FOUND
    assert result.snippets == []
    assert result.error is None


async def test_load_after_save_returns_snippets(persistence):
    await persistence.save([_snippet("a"), _snippet("b")])
    result = await persistence.load()
    assert result.ok
    assert sorted(s.id for s in result.snippets) == ["a", "b"]


async def test_load_unparseable_payload_is_corrupt(medium, persistence):
    medium.entries[STORE_KEY] = "{{{ not json"
    result = await persistence.load()
    assert result.status == LoadStatus.CORRUPT
    assert result.snippets == []
    assert result.error.kind == PersistenceKind.CORRUPT


async def test_load_structurally_invalid_payload_is_corrupt(medium, persistence):
    medium.entries[STORE_KEY] = json.dumps([{"id": 1}])
    assert (await persistence.load()).status == LoadStatus.CORRUPT


async def test_load_unknown_schema_version_is_corrupt(medium, persistence):
    medium.entries[STORE_KEY] = json.dumps({"schemaVersion": 2, "snippets": []})
    assert (await persistence.load()).status == LoadStatus.CORRUPT


async def test_load_with_backend_down_is_unavailable():
    result = await SnippetPersistence(UnavailableMedium(), STORE_KEY).load()
    assert result.status == LoadStatus.UNAVAILABLE
    assert result.error.kind == PersistenceKind.STORAGE_UNAVAILABLE


# --- save ---------------------------------------------------------------------

async def test_save_writes_codec_envelope_under_key(medium, persistence):
    snippets = [_snippet("a")]
    result = await persistence.save(snippets)
    assert result.ok
    assert medium.entries[STORE_KEY] == serialize_snippets(snippets)
    assert result.size_bytes == len(medium.entries[STORE_KEY].encode("utf-8"))


async def test_save_over_quota_returns_quota_exceeded_and_keeps_old_value():
    medium = InMemoryKeyValueMedium(quota_bytes=600)
    persistence = SnippetPersistence(medium, STORE_KEY)
    assert (await persistence.save([_snippet("a")])).ok
    before = medium.entries[STORE_KEY]

    result = await persistence.save([_snippet("a"), _snippet("big", code="x" * 1_000)])

    assert result.status == SaveStatus.QUOTA_EXCEEDED
    assert result.error.kind == PersistenceKind.QUOTA_EXCEEDED
    assert medium.entries[STORE_KEY] == before


async def test_quota_counts_utf8_bytes():
    medium = InMemoryKeyValueMedium(quota_bytes=400)
    persistence = SnippetPersistence(medium, STORE_KEY)
    ascii_result = await persistence.save([_snippet("a", code="a" * 60)])
    wide_result = await persistence.save([_snippet("a", code="語" * 60)])
    assert ascii_result.ok
    assert wide_result.status == SaveStatus.QUOTA_EXCEEDED


async def test_save_unserializable_collection_is_serialization_failure(medium, persistence):
    await persistence.save([_snippet("a")])
    before = medium.entries[STORE_KEY]

    broken = replace(_snippet("b"), code=object())
    result = await persistence.save([_snippet("a"), broken])

    assert result.status == SaveStatus.SERIALIZATION_FAILURE
    assert result.error.kind == PersistenceKind.SERIALIZATION_FAILURE
    assert medium.entries[STORE_KEY] == before


async def test_save_nan_timestamp_is_serialization_failure(persistence):
    result = await persistence.save([replace(_snippet("a"), updated_at=float("nan"))])
    assert result.status == SaveStatus.SERIALIZATION_FAILURE


async def test_save_with_backend_down_is_storage_unavailable():
    result = await SnippetPersistence(UnavailableMedium(), STORE_KEY).save([_snippet()])
    assert result.status == SaveStatus.STORAGE_UNAVAILABLE
    assert not result.ok
