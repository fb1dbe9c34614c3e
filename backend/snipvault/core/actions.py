"""Actions — the closed set of commands accepted by the snippet store.

Invariants:
    - Every action is a frozen dataclass (hashable, comparable, loggable)
    - Action is the exhaustive union; apply_action matches on exactly these types

Design Decisions:
    - Tagged union of dataclasses over a string `type` field: the type checker
      flags a missing match arm, and payloads are typed per action
"""

from dataclasses import dataclass

from snipvault.core.snippet import Snippet


@dataclass(frozen=True)
class AddSnippet:
    snippet: Snippet


@dataclass(frozen=True)
class UpdateSnippet:
    snippet: Snippet


@dataclass(frozen=True)
class DeleteSnippet:
    snippet_id: str


@dataclass(frozen=True)
class ToggleFavorite:
    snippet_id: str


@dataclass(frozen=True)
class ReplaceAll:
    snippets: tuple[Snippet, ...]


@dataclass(frozen=True)
class ImportMerge:
    snippets: tuple[Snippet, ...]


@dataclass(frozen=True)
class SetSearchQuery:
    query: str


@dataclass(frozen=True)
class SetLanguageFilter:
    language: str


@dataclass(frozen=True)
class SetEditingTarget:
    snippet_id: str | None


Action = (
    AddSnippet | UpdateSnippet | DeleteSnippet | ToggleFavorite
    | ReplaceAll | ImportMerge
    | SetSearchQuery | SetLanguageFilter | SetEditingTarget
)
