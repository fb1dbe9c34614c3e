"""Database Infrastructure — SQLAlchemy declarative base for the key/value store.

Invariants:
    - Single async engine per process (owned by DatabaseSessionManager)
    - All sessions are async (AsyncSession)

Design Decisions:
    - aiosqlite driver by default: a personal organizer keeps its data in one local file
"""
