"""Snippet Codec — portable JSON encoding for export, import and persistence.

Invariants:
    - serialize_snippets is deterministic: same collection -> same text
    - deserialize_snippets(serialize_snippets(c)) == c (snippet order aside)
    - A payload is accepted whole or rejected whole: one bad entry rejects all
    - Wire names are camelCase (isFavorite, createdAt, updatedAt)

Design Decisions:
    - Versioned envelope {"schemaVersion", "snippets"}; a bare JSON array is
      still accepted on import for exports made before the envelope existed
    - Strict pydantic record: no coercion ("1" is not a number, 1 is not a bool)
    - Encoding failures (TypeError/ValueError from json) propagate to the caller;
      the persistence adapter turns them into SERIALIZATION_FAILURE
"""

import json
from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from snipvault.core.domain_types import SCHEMA_VERSION, SnippetId, Timestamp, ValidationKind
from snipvault.core.errors import SnippetValidationError
from snipvault.core.snippet import Snippet
from snipvault.core.transition import check_unique_ids


class SnippetRecord(BaseModel):
    """Wire shape of one snippet — structural validation only."""

    model_config = ConfigDict(
        strict=True, extra="ignore", populate_by_name=True, allow_inf_nan=False,
    )

    id: str
    title: str
    language: str
    code: str
    tags: list[str]
    is_favorite: bool = Field(alias="isFavorite")
    created_at: int | float = Field(alias="createdAt")
    updated_at: int | float = Field(alias="updatedAt")

    def to_snippet(self) -> Snippet:
        return Snippet(
            id=SnippetId(self.id),
            title=self.title,
            language=self.language,
            code=self.code,
            tags=tuple(self.tags),
            is_favorite=self.is_favorite,
            created_at=Timestamp(self.created_at),
            updated_at=Timestamp(self.updated_at),
        )


# --- Encoding -----------------------------------------------------------------

def snippet_to_record(snippet: Snippet) -> dict:
    """JSON-safe dict in wire field order. Pure, no IO."""
    return {
        "id": snippet.id,
        "title": snippet.title,
        "language": snippet.language,
        "code": snippet.code,
        "tags": list(snippet.tags),
        "isFavorite": snippet.is_favorite,
        "createdAt": snippet.created_at,
        "updatedAt": snippet.updated_at,
    }


def serialize_snippets(snippets: Iterable[Snippet]) -> str:
    """Encode the full collection as a human-diffable JSON document."""
    ordered = sorted(snippets, key=lambda s: (s.created_at, s.id))
    payload = {
        "schemaVersion": SCHEMA_VERSION,
        "snippets": [snippet_to_record(s) for s in ordered],
    }
    return json.dumps(payload, indent=2, ensure_ascii=False, allow_nan=False)


# --- Decoding -----------------------------------------------------------------

def deserialize_snippets(text: str) -> list[Snippet]:
    """Parse and validate an external payload. Raises SnippetValidationError."""
    try:
        document = json.loads(text)
    except (json.JSONDecodeError, RecursionError) as e:
        raise SnippetValidationError(
            ValidationKind.MALFORMED_ENCODING,
            "Payload is not valid JSON",
            details=[str(e)],
        ) from e

    entries = _extract_entries(document)
    snippets: list[Snippet] = []
    problems: list[str] = []
    for index, entry in enumerate(entries):
        try:
            record = SnippetRecord.model_validate(entry)
        except ValidationError as e:
            problems.extend(_describe(index, e))
            continue
        if record.updated_at < record.created_at:
            problems.append(f"entry {index}: updatedAt is earlier than createdAt")
            continue
        snippets.append(record.to_snippet())

    if problems:
        raise SnippetValidationError(
            ValidationKind.STRUCTURAL_MISMATCH,
            f"{len(entries)} entries checked, invalid entries found; nothing imported",
            details=problems,
        )
    check_unique_ids(snippets)
    return snippets


def _extract_entries(document: object) -> list:
    """Unwrap the versioned envelope (or accept a bare array)."""
    if isinstance(document, list):
        return document
    if isinstance(document, dict):
        version = document.get("schemaVersion")
        entries = document.get("snippets")
        if version != SCHEMA_VERSION or isinstance(version, bool):
            raise SnippetValidationError(
                ValidationKind.STRUCTURAL_MISMATCH,
                f"Unsupported schemaVersion: {version!r}",
            )
        if isinstance(entries, list):
            return entries
    raise SnippetValidationError(
        ValidationKind.STRUCTURAL_MISMATCH,
        "Payload must be a list of snippets or a snippet envelope",
    )


def _describe(index: int, error: ValidationError) -> list[str]:
    return [
        f"entry {index}: {'.'.join(str(p) for p in e['loc']) or '<root>'}: {e['msg']}"
        for e in error.errors()
    ]
