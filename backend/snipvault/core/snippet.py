"""Snippet — the immutable record for one saved code fragment.

Invariants:
    - id is immutable after creation (frozen dataclass)
    - updated_at >= created_at for every snippet built through this module
    - Every refresh of updated_at is strictly greater than the previous value

Design Decisions:
    - Frozen dataclass with tuple tags: snippets are values, transitions build new ones
    - Time is an argument (now_ms), never read here: keeps core deterministic
"""

import uuid
from dataclasses import dataclass, field, replace

from snipvault.core.domain_types import SnippetId, Timestamp


@dataclass(frozen=True)
class Snippet:
    """A single saved code fragment — pure value, no IO."""

    id: SnippetId
    title: str
    language: str
    code: str
    tags: tuple[str, ...] = field(default_factory=tuple)
    is_favorite: bool = False
    created_at: Timestamp = Timestamp(0)
    updated_at: Timestamp = Timestamp(0)

    @property
    def tag_list(self) -> list[str]:
        """Tags in display order."""
        return list(self.tags)


def refreshed_timestamp(previous: int, now_ms: int) -> Timestamp:
    """Next updated_at for a snippet last touched at `previous`.

    Strictly increases even when the clock did not move (or moved back).
    """
    return Timestamp(max(now_ms, previous + 1))


def touch(snippet: Snippet, now_ms: int) -> Snippet:
    """Return the snippet with updated_at refreshed."""
    return replace(
        snippet,
        updated_at=refreshed_timestamp(
            max(snippet.updated_at, snippet.created_at), now_ms,
        ),
    )


def new_snippet(
    title: str,
    language: str,
    code: str,
    now_ms: int,
    tags: list[str] | tuple[str, ...] = (),
    is_favorite: bool = False,
    snippet_id: str | None = None,
) -> Snippet:
    """Build a fresh snippet with created_at == updated_at == now_ms."""
    return Snippet(
        id=SnippetId(snippet_id or str(uuid.uuid4())),
        title=title,
        language=language,
        code=code,
        tags=tuple(tags),
        is_favorite=is_favorite,
        created_at=Timestamp(now_ms),
        updated_at=Timestamp(now_ms),
    )
