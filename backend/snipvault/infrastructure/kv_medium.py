"""Key/Value Media — durable (SQL) and ephemeral (in-memory) KeyValueMedium implementations.

Invariants:
    - write() is all-or-nothing: quota is checked before any IO, and the SQL
      upsert commits in a single transaction (rollback leaves the old value)
    - Quota is measured in UTF-8 bytes of the stored value
    - read() returns None for a missing key, never an empty string stand-in

Design Decisions:
    - SqlKeyValueMedium rides on DatabaseSessionManager, so SQLAlchemy errors
      arrive already mapped to DatabaseError
    - InMemoryKeyValueMedium mirrors the SQL contract for tests and throwaway sessions
"""

import logging

from snipvault.core.errors import QuotaExceededError
from snipvault.infrastructure.database import DatabaseSessionManager
from snipvault.models.kv_entry import KeyValueEntry

logger = logging.getLogger(__name__)


def _check_quota(value: str, quota_bytes: int | None) -> None:
    if quota_bytes is None:
        return
    size = len(value.encode("utf-8"))
    if size > quota_bytes:
        raise QuotaExceededError(size, quota_bytes)


class SqlKeyValueMedium:
    """KeyValueMedium backed by the kv_entries table."""

    def __init__(
        self, manager: DatabaseSessionManager, quota_bytes: int | None = None,
    ) -> None:
        self._manager = manager
        self.quota_bytes = quota_bytes

    async def read(self, key: str) -> str | None:
        async with self._manager.session() as db:
            entry = await db.get(KeyValueEntry, key)
            return entry.value if entry is not None else None

    async def write(self, key: str, value: str) -> None:
        _check_quota(value, self.quota_bytes)
        async with self._manager.session() as db:
            entry = await db.get(KeyValueEntry, key)
            if entry is None:
                db.add(KeyValueEntry(key=key, value=value))
            else:
                entry.value = value
            await db.commit()
        logger.debug("Wrote key", extra={"store_key": key})

    async def ping(self) -> bool:
        return await self._manager.health_check()

    async def dispose(self) -> None:
        await self._manager.dispose()


class InMemoryKeyValueMedium:
    """KeyValueMedium held in a dict. Lost when the process exits."""

    def __init__(self, quota_bytes: int | None = None) -> None:
        self.entries: dict[str, str] = {}
        self.quota_bytes = quota_bytes
        self.write_count = 0

    async def read(self, key: str) -> str | None:
        return self.entries.get(key)

    async def write(self, key: str, value: str) -> None:
        _check_quota(value, self.quota_bytes)
        self.entries[key] = value
        self.write_count += 1

    async def ping(self) -> bool:
        return True

    async def dispose(self) -> None:
        return None
