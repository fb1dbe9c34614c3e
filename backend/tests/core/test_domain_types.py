"""Domain Types — verifies identity wrappers, constants and enum values.

Tests:
    - NewType wrappers are transparent at runtime
    - Enums serialize to their lowercase string values
    - Result statuses cover every persistence failure kind
"""

from snipvault.core.domain_types import (
    KNOWN_LANGUAGES, SCHEMA_VERSION, ImportMode, LoadStatus, PersistenceKind,
    SaveStatus, SnippetId, Timestamp, ValidationKind,
)


def test_identity_types_are_transparent():
    assert SnippetId("abc") == "abc"
    assert Timestamp(1_700_000_000_000) == 1_700_000_000_000


def test_schema_version_is_one():
    assert SCHEMA_VERSION == 1


def test_known_languages_are_unique_and_include_other():
    assert len(set(KNOWN_LANGUAGES)) == len(KNOWN_LANGUAGES)
    assert "other" in KNOWN_LANGUAGES


def test_import_mode_parses_from_query_value():
    assert ImportMode("replace") is ImportMode.REPLACE
    assert ImportMode("merge") is ImportMode.MERGE


def test_validation_kinds():
    assert {k.value for k in ValidationKind} == {"malformed_encoding", "structural_mismatch"}


def test_save_failures_mirror_persistence_kinds():
    failures = {s.name for s in SaveStatus} - {"SUCCESS"}
    assert failures <= {k.name for k in PersistenceKind}


def test_load_status_members():
    assert set(LoadStatus) == {
        LoadStatus.LOADED, LoadStatus.NOT_FOUND, LoadStatus.CORRUPT, LoadStatus.UNAVAILABLE,
    }
