"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - SnippetId wraps str — ids are opaque text, never parsed
    - Timestamp is epoch milliseconds (int)
    - All closed sets of states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
    - KNOWN_LANGUAGES are suggestions for the UI, not a validation whitelist
"""

from enum import Enum
from typing import NewType


# ─── Identity / Value Types ──────────────────────────────────────

SnippetId = NewType("SnippetId", str)
Timestamp = NewType("Timestamp", int)   # epoch milliseconds


# ─── Constants ───────────────────────────────────────────────────

SCHEMA_VERSION = 1

KNOWN_LANGUAGES: tuple[str, ...] = (
    "javascript", "typescript", "python", "java", "cpp", "c",
    "csharp", "go", "rust", "ruby", "php", "swift", "kotlin",
    "html", "css", "sql", "bash", "json", "yaml", "markdown", "other",
)


# ─── Enums ───────────────────────────────────────────────────────

class ImportMode(str, Enum):
    """How an imported payload is applied to the current collection."""
    REPLACE = "replace"
    MERGE = "merge"


class ValidationKind(str, Enum):
    """Why an external payload was rejected by the codec."""
    MALFORMED_ENCODING = "malformed_encoding"
    STRUCTURAL_MISMATCH = "structural_mismatch"


class PersistenceKind(str, Enum):
    """Failure modes of the persistent store adapter."""
    QUOTA_EXCEEDED = "quota_exceeded"
    SERIALIZATION_FAILURE = "serialization_failure"
    CORRUPT = "corrupt"
    STORAGE_UNAVAILABLE = "storage_unavailable"


class ClipboardKind(str, Enum):
    """Failure modes reported by clipboard collaborators."""
    PERMISSION_DENIED = "permission_denied"
    UNSUPPORTED = "unsupported"


class LoadStatus(str, Enum):
    """Outcome of reading the persisted collection."""
    LOADED = "loaded"
    NOT_FOUND = "not_found"
    CORRUPT = "corrupt"
    UNAVAILABLE = "unavailable"


class SaveStatus(str, Enum):
    """Outcome of writing the collection to the medium."""
    SUCCESS = "success"
    QUOTA_EXCEEDED = "quota_exceeded"
    SERIALIZATION_FAILURE = "serialization_failure"
    STORAGE_UNAVAILABLE = "storage_unavailable"
