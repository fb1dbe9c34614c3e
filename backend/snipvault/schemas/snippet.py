"""Snippet Schemas — Pydantic models with field-level validation for API boundaries.

Invariants:
    - SnippetCreate/SnippetUpdate.title: 1-200 chars, stripped, non-empty
    - Tags are stripped; empty tags dropped; duplicates removed keeping first position
    - FilterUpdate only touches the filters the client actually sent

Design Decisions:
    - snake_case on the HTTP API; camelCase is reserved for the export format
    - field_validator for side-effect-free transforms such as strip
"""

from pydantic import BaseModel, Field, field_validator

from snipvault.core.snippet import Snippet


class SnippetFields(BaseModel):
    """Editable fields shared by create and update."""
    title: str = Field(min_length=1, max_length=200)
    language: str = Field(min_length=1, max_length=50)
    code: str = ""
    tags: list[str] = Field(default_factory=list, max_length=50)
    is_favorite: bool = False

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title cannot be empty or whitespace")
        return v

    @field_validator("language")
    @classmethod
    def strip_language(cls, v: str) -> str:
        return v.strip()

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, v: list[str]) -> list[str]:
        seen: list[str] = []
        for tag in (t.strip() for t in v):
            if tag and tag not in seen:
                seen.append(tag)
        return seen


class SnippetCreate(SnippetFields):
    """Snippet creation — id is server-assigned unless provided."""
    id: str | None = Field(None, min_length=1, max_length=128)


class SnippetUpdate(SnippetFields):
    """Full replacement of a snippet's editable fields."""


class FilterUpdate(BaseModel):
    """Transient filter parameters; omitted fields are left unchanged."""
    search_query: str | None = Field(None, max_length=200)
    language_filter: str | None = Field(None, max_length=50)
    editing_id: str | None = None


class SnippetResponse(BaseModel):
    """Snippet response — public-facing snippet data."""
    id: str
    title: str
    language: str
    code: str
    tags: list[str]
    is_favorite: bool
    created_at: int | float
    updated_at: int | float

    @classmethod
    def from_snippet(cls, snippet: Snippet) -> "SnippetResponse":
        return cls(
            id=snippet.id,
            title=snippet.title,
            language=snippet.language,
            code=snippet.code,
            tags=snippet.tag_list,
            is_favorite=snippet.is_favorite,
            created_at=snippet.created_at,
            updated_at=snippet.updated_at,
        )


class StateResponse(BaseModel):
    """Read-only snapshot of the collection state."""
    snippets: list[SnippetResponse]
    search_query: str
    language_filter: str
    editing_id: str | None
    last_save_status: str | None = None
    load_warning: str | None = None
