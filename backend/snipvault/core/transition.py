"""Snippet Transition — the pure state machine behind SnippetEngine.dispatch.

Invariants:
    - apply_action never mutates its input; it returns a new CollectionState
      (or the same object when the action is a no-op)
    - Snippet ids stay unique: duplicate AddSnippet raises DuplicateIdError,
      bulk payloads with repeated ids raise SnippetValidationError
    - No snippet enters the collection with updated_at earlier than created_at
    - Every snippet mutation refreshes updated_at strictly upward
    - Actions outside the closed union raise UnknownActionError

Design Decisions:
    - Exhaustive `match` over frozen dataclasses: no action silently ignored
    - Duplicate add is rejected, not coalesced (identifier uniqueness wins)
    - UpdateSnippet / ToggleFavorite on an absent id are no-ops, matching DeleteSnippet
    - Deleting the snippet being edited also clears the editing target
    - ReplaceAll likewise drops an editing target that is no longer present
"""

from collections import Counter
from dataclasses import replace

from snipvault.core.actions import (
    Action, AddSnippet, UpdateSnippet, DeleteSnippet, ToggleFavorite,
    ReplaceAll, ImportMerge, SetSearchQuery, SetLanguageFilter, SetEditingTarget,
)
from snipvault.core.collection_state import CollectionState
from snipvault.core.domain_types import SnippetId, ValidationKind
from snipvault.core.errors import (
    DuplicateIdError, SnippetValidationError, UnknownActionError,
)
from snipvault.core.snippet import Snippet, refreshed_timestamp, touch


def apply_action(state: CollectionState, action: Action, now_ms: int) -> CollectionState:
    """Apply one action to the state. Pure: `now_ms` is the only clock."""
    match action:
        case AddSnippet(snippet=snippet):
            return _add(state, snippet)
        case UpdateSnippet(snippet=snippet):
            return _update(state, snippet, now_ms)
        case DeleteSnippet(snippet_id=snippet_id):
            return _delete(state, SnippetId(snippet_id))
        case ToggleFavorite(snippet_id=snippet_id):
            return _toggle_favorite(state, SnippetId(snippet_id), now_ms)
        case ReplaceAll(snippets=snippets):
            check_unique_ids(snippets)
            check_timestamps(snippets)
            return _replace_all(state, snippets)
        case ImportMerge(snippets=snippets):
            check_unique_ids(snippets)
            check_timestamps(snippets)
            return _merge(state, snippets, now_ms)
        case SetSearchQuery(query=query):
            return replace(state, search_query=query)
        case SetLanguageFilter(language=language):
            return replace(state, language_filter=language)
        case SetEditingTarget(snippet_id=snippet_id):
            editing = SnippetId(snippet_id) if snippet_id is not None else None
            return replace(state, editing_id=editing)
        case _:
            raise UnknownActionError(action)


def check_unique_ids(snippets: tuple[Snippet, ...] | list[Snippet]) -> None:
    """Raise STRUCTURAL_MISMATCH when a bulk payload repeats an id."""
    repeated = sorted(i for i, n in Counter(s.id for s in snippets).items() if n > 1)
    if repeated:
        raise SnippetValidationError(
            ValidationKind.STRUCTURAL_MISMATCH,
            "Payload contains repeated snippet ids",
            details=[f"duplicate id: {i}" for i in repeated],
        )


def check_timestamps(snippets: tuple[Snippet, ...] | list[Snippet]) -> None:
    """Raise STRUCTURAL_MISMATCH when a snippet was updated before it was created."""
    backwards = [s.id for s in snippets if s.updated_at < s.created_at]
    if backwards:
        raise SnippetValidationError(
            ValidationKind.STRUCTURAL_MISMATCH,
            "updatedAt is earlier than createdAt",
            details=[f"{i}: updatedAt is earlier than createdAt" for i in backwards],
        )


# --- Collection transitions ---------------------------------------------------

def _add(state: CollectionState, snippet: Snippet) -> CollectionState:
    check_timestamps((snippet,))
    if snippet.id in state.snippets:
        raise DuplicateIdError(snippet.id)
    return replace(state, snippets={**state.snippets, snippet.id: snippet})


def _update(state: CollectionState, snippet: Snippet, now_ms: int) -> CollectionState:
    current = state.snippets.get(snippet.id)
    if current is None:
        return state
    updated = replace(
        snippet,
        created_at=current.created_at,
        updated_at=refreshed_timestamp(current.updated_at, now_ms),
    )
    return replace(state, snippets={**state.snippets, snippet.id: updated})


def _delete(state: CollectionState, snippet_id: SnippetId) -> CollectionState:
    if snippet_id not in state.snippets:
        return state
    remaining = {k: v for k, v in state.snippets.items() if k != snippet_id}
    editing = None if state.editing_id == snippet_id else state.editing_id
    return replace(state, snippets=remaining, editing_id=editing)


def _replace_all(
    state: CollectionState, snippets: tuple[Snippet, ...],
) -> CollectionState:
    replaced = {s.id: s for s in snippets}
    editing = state.editing_id if state.editing_id in replaced else None
    return replace(state, snippets=replaced, editing_id=editing)


def _toggle_favorite(
    state: CollectionState, snippet_id: SnippetId, now_ms: int,
) -> CollectionState:
    current = state.snippets.get(snippet_id)
    if current is None:
        return state
    flipped = touch(replace(current, is_favorite=not current.is_favorite), now_ms)
    return replace(state, snippets={**state.snippets, snippet_id: flipped})


def _merge(
    state: CollectionState, incoming: tuple[Snippet, ...], now_ms: int,
) -> CollectionState:
    merged = dict(state.snippets)
    for snippet in incoming:
        existing = merged.get(snippet.id)
        if existing is None:
            merged[snippet.id] = snippet
            continue
        # Incoming wins; updated_at must still move past both versions
        floor = max(existing.updated_at, snippet.updated_at, snippet.created_at)
        merged[snippet.id] = replace(
            snippet, updated_at=refreshed_timestamp(floor, now_ms),
        )
    return replace(state, snippets=merged)
