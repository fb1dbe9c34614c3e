"""Snippet Schemas — request normalization at the API boundary.

Invariants:
    - Titles are stripped and must not be blank
    - Tags are stripped, blanks dropped, duplicates removed in order
    - FilterUpdate records which fields the client sent
"""

import pytest
from pydantic import ValidationError

from snipvault.core.snippet import new_snippet
from snipvault.schemas.snippet import (
    FilterUpdate, SnippetCreate, SnippetResponse, SnippetUpdate,
)


def test_create_strips_title_and_language():
    body = SnippetCreate(title="  Quick sort ", language=" python ")
    assert body.title == "Quick sort"
    assert body.language == "python"
    assert body.id is None


@pytest.mark.parametrize("title", ["", "   ", "x" * 201])
def test_invalid_titles_rejected(title):
    with pytest.raises(ValidationError):
        SnippetUpdate(title=title, language="go")


def test_tags_normalized():
    body = SnippetUpdate(title="T", language="go", tags=[" a", "b ", "", "a", "  "])
    assert body.tags == ["a", "b"]


def test_create_rejects_empty_id():
    with pytest.raises(ValidationError):
        SnippetCreate(id="", title="T", language="go")


def test_filter_update_tracks_sent_fields():
    body = FilterUpdate.model_validate({"editing_id": None})
    assert body.model_fields_set == {"editing_id"}


def test_response_from_snippet_lists_tags():
    snippet = new_snippet(
        title="T", language="go", code="", now_ms=5, tags=("a", "b"), snippet_id="s",
    )
    response = SnippetResponse.from_snippet(snippet)
    assert response.tags == ["a", "b"]
    assert response.created_at == response.updated_at == 5
