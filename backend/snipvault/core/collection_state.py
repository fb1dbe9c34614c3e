"""Collection State — the authoritative snippet collection plus transient filters.

Invariants:
    - snippets is keyed by Snippet.id, so ids are unique by construction
    - The mapping is never mutated in place; transitions build a new dict
    - language_filter may name a language no snippet has anymore (stale is accepted)

Design Decisions:
    - Frozen dataclass: every dispatch yields a new value the caller can compare
      by identity to decide whether persistence or view recomputation is needed
    - Filter parameters live here for uniformity but are never persisted
"""

from dataclasses import dataclass, field

from snipvault.core.domain_types import SnippetId
from snipvault.core.snippet import Snippet


@dataclass(frozen=True)
class CollectionState:
    """Per-session collection state — pure dataclass, no IO."""

    snippets: dict[SnippetId, Snippet] = field(default_factory=dict)

    # === Transient UI filters (not persisted) ===
    search_query: str = ""
    language_filter: str = ""
    editing_id: SnippetId | None = None

    # --- Computed properties ---------------------------------------------------

    @property
    def size(self) -> int:
        return len(self.snippets)

    @property
    def editing_snippet(self) -> Snippet | None:
        """Snippet currently open in the editor, if it still exists."""
        if self.editing_id is None:
            return None
        return self.snippets.get(self.editing_id)

    def get(self, snippet_id: str) -> Snippet | None:
        return self.snippets.get(SnippetId(snippet_id))

    def all_snippets(self) -> list[Snippet]:
        """Snippets in insertion order."""
        return list(self.snippets.values())

    @classmethod
    def seeded(cls, snippets: list[Snippet]) -> "CollectionState":
        """Initial state for a session, built from persisted snippets."""
        return cls(snippets={s.id: s for s in snippets})
