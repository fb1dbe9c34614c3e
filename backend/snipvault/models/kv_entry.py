"""Key/Value Entry ORM — one durable text value per fixed key.

Invariants:
    - key is the primary key; a write replaces the whole value
    - value holds the full serialized envelope (never a fragment)

Design Decisions:
    - Text column over JSON: the codec owns the encoding, the table only stores text
"""

from datetime import datetime, timezone

from sqlalchemy import String, Text, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from snipvault.db.base import Base


class KeyValueEntry(Base):
    """Stored value for one key of the persistent store."""
    __tablename__ = "kv_entries"

    key: Mapped[str] = mapped_column(String(128), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
