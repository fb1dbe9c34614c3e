"""Persistent Store Adapter — load/save the snippet collection through a KeyValueMedium.

Invariants:
    - load() and save() never raise; every failure comes back as a result value
    - save() writes the whole collection under one fixed key (no partial writes)
    - A failed save leaves the previously persisted value intact
    - Anything but LOADED lets the caller seed an empty collection

Design Decisions:
    - Results as frozen dataclasses carrying a status enum and an optional
      PersistenceError, so callers branch on status and surface the error as-is
    - The codec envelope is reused for storage: one schema version for backups and disk
"""

import logging
from dataclasses import dataclass, field
from collections.abc import Iterable

from snipvault.core.domain_types import LoadStatus, PersistenceKind, SaveStatus
from snipvault.core.errors import (
    DatabaseError, PersistenceError, QuotaExceededError, SnippetValidationError,
)
from snipvault.core.repository_protocols import KeyValueMedium
from snipvault.core.snippet import Snippet
from snipvault.core.snippet_codec import deserialize_snippets, serialize_snippets

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadResult:
    status: LoadStatus
    snippets: list[Snippet] = field(default_factory=list)
    error: PersistenceError | None = None

    @property
    def ok(self) -> bool:
        return self.status == LoadStatus.LOADED


@dataclass(frozen=True)
class SaveResult:
    status: SaveStatus
    error: PersistenceError | None = None
    size_bytes: int = 0

    @property
    def ok(self) -> bool:
        return self.status == SaveStatus.SUCCESS


class SnippetPersistence:
    """Reads and writes the serialized collection under `key`."""

    def __init__(self, medium: KeyValueMedium, key: str) -> None:
        self.medium = medium
        self.key = key

    async def load(self) -> LoadResult:
        """Read the stored collection. Missing -> NOT_FOUND, unreadable -> CORRUPT."""
        try:
            raw = await self.medium.read(self.key)
        except DatabaseError as e:
            logger.error(
                f"Failed to read persisted snippets: {e.message}",
                extra={"store_key": self.key, "error_code": e.code},
            )
            return LoadResult(
                LoadStatus.UNAVAILABLE,
                error=PersistenceError(
                    PersistenceKind.STORAGE_UNAVAILABLE, "Snippet storage is unavailable",
                ),
            )
        if raw is None:
            return LoadResult(LoadStatus.NOT_FOUND)
        try:
            snippets = deserialize_snippets(raw)
        except SnippetValidationError as e:
            logger.warning(
                f"Persisted snippets are corrupt ({e.kind.value}); starting empty",
                extra={"store_key": self.key, "load_status": LoadStatus.CORRUPT.value},
            )
            return LoadResult(
                LoadStatus.CORRUPT,
                error=PersistenceError(
                    PersistenceKind.CORRUPT, "Stored snippets are unreadable",
                ),
            )
        return LoadResult(LoadStatus.LOADED, snippets=snippets)

    async def save(self, snippets: Iterable[Snippet]) -> SaveResult:
        """Replace the stored collection. Returns a SaveResult, never raises."""
        try:
            payload = serialize_snippets(snippets)
        except (TypeError, ValueError) as e:
            logger.error(
                f"Snippet collection is not serializable: {e}",
                extra={"store_key": self.key, "save_status": SaveStatus.SERIALIZATION_FAILURE.value},
            )
            return SaveResult(
                SaveStatus.SERIALIZATION_FAILURE,
                error=PersistenceError(
                    PersistenceKind.SERIALIZATION_FAILURE,
                    "Snippet collection could not be encoded",
                ),
            )

        size = len(payload.encode("utf-8"))
        try:
            await self.medium.write(self.key, payload)
        except QuotaExceededError as e:
            logger.warning(
                e.message,
                extra={"store_key": self.key, "save_status": SaveStatus.QUOTA_EXCEEDED.value},
            )
            return SaveResult(
                SaveStatus.QUOTA_EXCEEDED,
                error=PersistenceError(PersistenceKind.QUOTA_EXCEEDED, e.message),
                size_bytes=size,
            )
        except DatabaseError as e:
            logger.error(
                f"Failed to persist snippets: {e.message}",
                extra={"store_key": self.key, "error_code": e.code},
            )
            return SaveResult(
                SaveStatus.STORAGE_UNAVAILABLE,
                error=PersistenceError(
                    PersistenceKind.STORAGE_UNAVAILABLE, "Snippet storage is unavailable",
                ),
                size_bytes=size,
            )
        return SaveResult(SaveStatus.SUCCESS, size_bytes=size)
