"""View Deriver — filtered listings and filter options computed from the collection.

Invariants:
    - Pure functions: no cache, no state, recomputed from scratch on each call
    - Search is a case-insensitive substring match on title or any tag
    - Language filter is an exact, case-sensitive match on Snippet.language
    - Empty query / empty filter means "match everything"

Design Decisions:
    - Display order (most recently updated first) is decided here, not in state
    - Memoization is the caller's job (SnippetEngine keys on input identity)
"""

from collections import Counter
from collections.abc import Iterable

from snipvault.core.snippet import Snippet


def matches(snippet: Snippet, search_query: str, language_filter: str) -> bool:
    """Whether one snippet passes both the search and the language filter."""
    if language_filter and snippet.language != language_filter:
        return False
    if not search_query:
        return True
    needle = search_query.casefold()
    if needle in snippet.title.casefold():
        return True
    return any(needle in tag.casefold() for tag in snippet.tags)


def derive_view(
    snippets: Iterable[Snippet], search_query: str = "", language_filter: str = "",
) -> list[Snippet]:
    """Snippets matching the filters, most recently updated first."""
    selected = [s for s in snippets if matches(s, search_query, language_filter)]
    selected.sort(key=lambda s: (s.title.casefold(), s.id))
    selected.sort(key=lambda s: s.updated_at, reverse=True)
    return selected


def distinct_languages(snippets: Iterable[Snippet]) -> list[str]:
    """Sorted set of every language present — options for the filter control."""
    return sorted({s.language for s in snippets})


def collection_stats(snippets: Iterable[Snippet]) -> dict:
    """Summary counts for the collection. Pure, no IO."""
    items = list(snippets)
    languages = Counter(s.language for s in items)
    return {
        "total": len(items),
        "favorites": sum(1 for s in items if s.is_favorite),
        "languages": dict(sorted(languages.items())),
        "distinct_tags": len({tag for s in items for tag in s.tags}),
    }
