"""Snippet Engine — the dispatch surface UI collaborators call into.

Invariants:
    - State changes only through dispatch() -> apply_action (pure transition)
    - Every dispatch that changes the collection is handed to the writer before
      dispatch() returns; with write-through the save has completed by then
    - Dispatches are serialized: the next action is applied only after the
      previous one has been handed to the writer
    - Persistence and codec failures are returned as values; in-memory state
      keeps working when storage is unavailable
    - A failed import leaves the collection untouched

Design Decisions:
    - Engine reads the clock, the transition never does (impureim sandwich)
    - View and language results memoized on (snippets identity, query, filter):
      transitions produce a new dict whenever the collection changes
    - Unknown actions: re-raised when strict_actions (development), logged and
      ignored otherwise
"""

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from snipvault.core.actions import Action, ImportMerge, ReplaceAll
from snipvault.core.collection_state import CollectionState
from snipvault.core.domain_types import ImportMode, LoadStatus
from snipvault.core.errors import PersistenceError, SnippetValidationError, UnknownActionError
from snipvault.core.snippet import Snippet
from snipvault.core.snippet_codec import deserialize_snippets, serialize_snippets
from snipvault.core.transition import apply_action
from snipvault.core.view import collection_stats, derive_view, distinct_languages
from snipvault.services.debounced_writer import DebouncedSnapshotWriter
from snipvault.services.persistent_store import SaveResult, SnippetPersistence

logger = logging.getLogger(__name__)


def now_ms() -> int:
    """Wall clock in epoch milliseconds."""
    return int(time.time() * 1000)


@dataclass(frozen=True)
class ImportResult:
    mode: ImportMode
    imported: int = 0
    error: SnippetValidationError | None = None
    save: SaveResult | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class SnippetEngine:
    """Owns the CollectionState for one session and keeps it persisted."""

    def __init__(
        self,
        persistence: SnippetPersistence,
        state: CollectionState | None = None,
        debounce_seconds: float = 0.0,
        strict_actions: bool = True,
        clock: Callable[[], int] = now_ms,
        load_warning: PersistenceError | None = None,
    ) -> None:
        self._state = state or CollectionState()
        self._persistence = persistence
        self._writer = DebouncedSnapshotWriter(
            persistence, debounce_seconds, on_saved=self._record_save,
        )
        self._dispatch_lock = asyncio.Lock()
        self._strict = strict_actions
        self._clock = clock
        self._last_save: SaveResult | None = None
        self._view_cache: tuple[object, str, str, list[Snippet]] | None = None
        self._languages_cache: tuple[object, list[str]] | None = None
        self.load_warning = load_warning

    @classmethod
    async def open(
        cls, persistence: SnippetPersistence, **kwargs,
    ) -> "SnippetEngine":
        """Seed a session from the persistent store (empty when missing or corrupt)."""
        result = await persistence.load()
        if result.status == LoadStatus.LOADED:
            logger.info(
                f"Loaded {len(result.snippets)} snippets",
                extra={"store_key": persistence.key, "load_status": result.status.value},
            )
        elif result.status != LoadStatus.NOT_FOUND:
            logger.warning(
                "Starting with an empty collection: stored snippets unavailable",
                extra={"store_key": persistence.key, "load_status": result.status.value},
            )
        return cls(
            persistence,
            state=CollectionState.seeded(result.snippets),
            load_warning=result.error,
            **kwargs,
        )

    # --- Read surface ------------------------------------------------------------

    @property
    def state(self) -> CollectionState:
        """Current state. Immutable; safe to hand to collaborators."""
        return self._state

    @property
    def last_save(self) -> SaveResult | None:
        return self._last_save

    def get_view(
        self, query: str | None = None, language: str | None = None,
    ) -> list[Snippet]:
        """Filtered listing. Omitted arguments fall back to the state's filters."""
        query = self._state.search_query if query is None else query
        language = self._state.language_filter if language is None else language
        snippets = self._state.snippets
        cached = self._view_cache
        if cached and cached[0] is snippets and cached[1] == query and cached[2] == language:
            return list(cached[3])
        view = derive_view(snippets.values(), query, language)
        self._view_cache = (snippets, query, language, view)
        return list(view)

    def get_distinct_languages(self) -> list[str]:
        snippets = self._state.snippets
        if self._languages_cache and self._languages_cache[0] is snippets:
            return list(self._languages_cache[1])
        languages = distinct_languages(snippets.values())
        self._languages_cache = (snippets, languages)
        return list(languages)

    def now(self) -> int:
        """The engine clock, for callers that build new snippets."""
        return self._clock()

    def get_stats(self) -> dict:
        return collection_stats(self._state.snippets.values())

    def export_current_collection(self) -> str:
        return serialize_snippets(self._state.snippets.values())

    # --- Write surface -----------------------------------------------------------

    async def dispatch(self, action: Action) -> CollectionState:
        """Apply an action, persist the collection if it changed, return the new state."""
        async with self._dispatch_lock:
            previous = self._state
            try:
                new_state = apply_action(previous, action, self._clock())
            except UnknownActionError as e:
                if self._strict:
                    raise
                logger.warning(e.message, extra={"action": type(action).__name__})
                return previous

            self._state = new_state
            if new_state.snippets is not previous.snippets:
                logger.debug(
                    f"Collection changed ({new_state.size} snippets)",
                    extra={"action": type(action).__name__},
                )
                await self._writer.submit(new_state.all_snippets())
            return new_state

    async def import_collection(self, text: str, mode: ImportMode) -> ImportResult:
        """Validate an external payload, then replace or merge it into the collection."""
        try:
            snippets = deserialize_snippets(text)
            if mode == ImportMode.REPLACE:
                await self.dispatch(ReplaceAll(tuple(snippets)))
            else:
                await self.dispatch(ImportMerge(tuple(snippets)))
        except SnippetValidationError as e:
            logger.warning(
                f"Import rejected: {e.message}",
                extra={"import_mode": mode.value, "error_code": e.code},
            )
            return ImportResult(mode, error=e)
        logger.info(
            f"Imported {len(snippets)} snippets",
            extra={"import_mode": mode.value},
        )
        return ImportResult(mode, imported=len(snippets), save=self._last_save)

    async def storage_ready(self) -> bool:
        return await self._persistence.medium.ping()

    async def flush(self) -> SaveResult | None:
        return await self._writer.flush()

    async def close(self) -> None:
        """Teardown: flush any debounced write before the session ends."""
        await self._writer.aclose()

    async def dispose(self) -> None:
        """Release the storage medium (after close)."""
        await self._persistence.medium.dispose()

    def _record_save(self, result: SaveResult) -> None:
        self._last_save = result
        if not result.ok:
            logger.warning(
                "Collection kept in memory only; save failed",
                extra={"save_status": result.status.value},
            )
