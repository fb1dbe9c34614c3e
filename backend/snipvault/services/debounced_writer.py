"""Debounced Snapshot Writer — batches rapid mutations into one persistent write.

Invariants:
    - Only the latest submitted collection is ever written (older ones are superseded)
    - delay <= 0 means write-through: submit() awaits the save and returns its result
    - Writes run one at a time, in submission order (a later snapshot is never
      overwritten by an earlier one)
    - flush() writes any pending collection and waits for a timer-driven write
      already in progress; aclose() flushes, then submit() falls back to write-through

Design Decisions:
    - Explicit timer task + flush hook instead of a free-running background loop:
      ordering and failures stay observable from the caller
    - A timer stops being cancellable once its delay has elapsed; from then on it
      is tracked as the in-flight write
    - on_saved callback reports every SaveResult, including timer-driven ones,
      so SnippetEngine.last_save stays current
"""

import asyncio
import contextlib
import logging
from collections.abc import Callable

from snipvault.core.snippet import Snippet
from snipvault.services.persistent_store import SaveResult, SnippetPersistence

logger = logging.getLogger(__name__)


class DebouncedSnapshotWriter:
    """Coalesces saves of the snippet collection within a debounce window."""

    def __init__(
        self,
        persistence: SnippetPersistence,
        delay_seconds: float = 0.0,
        on_saved: Callable[[SaveResult], None] | None = None,
    ) -> None:
        self._persistence = persistence
        self._delay = delay_seconds
        self._on_saved = on_saved
        self._pending: list[Snippet] | None = None
        self._timer: asyncio.Task | None = None
        self._inflight: asyncio.Task | None = None
        self._write_lock = asyncio.Lock()
        self._closed = False

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    @property
    def is_writing(self) -> bool:
        return self._inflight is not None and not self._inflight.done()

    async def submit(self, snippets: list[Snippet]) -> SaveResult | None:
        """Queue a collection for saving. Returns the result when written now."""
        if self._delay <= 0 or self._closed:
            self._cancel_timer()
            self._pending = None
            return await self._write(snippets)
        self._pending = snippets
        self._cancel_timer()
        self._timer = asyncio.get_running_loop().create_task(self._fire_later())
        return None

    async def flush(self) -> SaveResult | None:
        """Write the pending collection now and wait out any in-flight write."""
        self._cancel_timer()
        result = None
        if self._pending is not None:
            snippets, self._pending = self._pending, None
            result = await self._write(snippets)
        await self._await_inflight()
        return result

    async def aclose(self) -> SaveResult | None:
        """Teardown hook: flush pending work and stop debouncing."""
        self._closed = True
        return await self.flush()

    async def _fire_later(self) -> None:
        await asyncio.sleep(self._delay)
        # Past this point the timer is a write, not a cancellable delay
        self._timer = None
        if self._pending is None:
            return
        snippets, self._pending = self._pending, None
        self._inflight = asyncio.current_task()
        await self._write(snippets)

    async def _write(self, snippets: list[Snippet]) -> SaveResult:
        async with self._write_lock:
            result = await self._persistence.save(snippets)
        if self._on_saved is not None:
            self._on_saved(result)
        return result

    def _cancel_timer(self) -> None:
        timer, self._timer = self._timer, None
        if timer is not None and timer is not asyncio.current_task() and not timer.done():
            timer.cancel()

    async def _await_inflight(self) -> None:
        inflight = self._inflight
        if inflight is not None and inflight is not asyncio.current_task() and not inflight.done():
            await asyncio.shield(inflight)
        if self._inflight is inflight:
            self._inflight = None

    async def wait_idle(self) -> None:
        """Wait for an armed timer and its write to finish (tests and shutdown)."""
        timer = self._timer
        if timer is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await timer
        await self._await_inflight()
