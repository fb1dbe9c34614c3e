"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: media do IO; the pure core never awaits them, the
      shell orchestrates the calls around the pure logic
"""

from typing import Protocol


class KeyValueMedium(Protocol):
    """Durable key/value storage holding one text value per key.

    write() replaces the value atomically: after a failed write the previous
    value is still readable. Oversized values raise QuotaExceededError before
    anything is written; other medium failures raise DatabaseError.
    """
    async def read(self, key: str) -> str | None: ...
    async def write(self, key: str, value: str) -> None: ...
    async def ping(self) -> bool: ...
    async def dispose(self) -> None: ...
