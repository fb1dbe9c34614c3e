"""Snippet Routes — CRUD, favorites, filters and views over the SnippetEngine.

Invariants:
    - Every mutation goes through engine.dispatch (never touches state directly)
    - Static paths (/state, /languages, /stats, /filters) are declared before /{snippet_id}
    - DELETE is idempotent: 204 whether or not the snippet existed

Design Decisions:
    - Domain errors (DuplicateIdError, ResourceNotFoundError) propagate to the
      global SnipVaultError handler instead of being mapped per route
"""

import logging

from fastapi import APIRouter, Depends, Query, Response, status

from snipvault.api.dependencies import get_engine
from snipvault.core.actions import (
    AddSnippet, DeleteSnippet, SetEditingTarget, SetLanguageFilter,
    SetSearchQuery, ToggleFavorite, UpdateSnippet,
)
from snipvault.core.domain_types import KNOWN_LANGUAGES, SnippetId, Timestamp
from snipvault.core.errors import ResourceNotFoundError
from snipvault.core.snippet import Snippet, new_snippet
from snipvault.schemas.snippet import (
    FilterUpdate, SnippetCreate, SnippetResponse, SnippetUpdate, StateResponse,
)
from snipvault.services.snippet_engine import SnippetEngine

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/snippets", tags=["snippets"])


def _get_or_404(engine: SnippetEngine, snippet_id: str) -> Snippet:
    snippet = engine.state.get(snippet_id)
    if snippet is None:
        raise ResourceNotFoundError("Snippet", snippet_id)
    return snippet


@router.get("", response_model=list[SnippetResponse])
async def list_snippets(
    q: str | None = Query(None, max_length=200),
    language: str | None = Query(None, max_length=50),
    engine: SnippetEngine = Depends(get_engine),
):
    """Filtered view. Omitted parameters use the stored filters."""
    return [SnippetResponse.from_snippet(s) for s in engine.get_view(q, language)]


@router.get("/state", response_model=StateResponse)
async def get_state(engine: SnippetEngine = Depends(get_engine)):
    """Read-only snapshot of the collection and its filters."""
    state = engine.state
    last_save = engine.last_save
    return StateResponse(
        snippets=[SnippetResponse.from_snippet(s) for s in state.all_snippets()],
        search_query=state.search_query,
        language_filter=state.language_filter,
        editing_id=state.editing_id,
        last_save_status=last_save.status.value if last_save else None,
        load_warning=engine.load_warning.message if engine.load_warning else None,
    )


@router.get("/languages")
async def list_languages(engine: SnippetEngine = Depends(get_engine)):
    """Languages present in the collection, plus the suggested set."""
    return {
        "languages": engine.get_distinct_languages(),
        "known": list(KNOWN_LANGUAGES),
    }


@router.get("/stats")
async def get_stats(engine: SnippetEngine = Depends(get_engine)):
    return engine.get_stats()


@router.put("/filters", response_model=StateResponse)
async def update_filters(
    body: FilterUpdate, engine: SnippetEngine = Depends(get_engine),
):
    """Set search query, language filter and/or editing target."""
    sent = body.model_fields_set
    if "search_query" in sent:
        await engine.dispatch(SetSearchQuery(body.search_query or ""))
    if "language_filter" in sent:
        await engine.dispatch(SetLanguageFilter(body.language_filter or ""))
    if "editing_id" in sent:
        await engine.dispatch(SetEditingTarget(body.editing_id))
    return await get_state(engine)


@router.get("/{snippet_id}", response_model=SnippetResponse)
async def get_snippet(snippet_id: str, engine: SnippetEngine = Depends(get_engine)):
    return SnippetResponse.from_snippet(_get_or_404(engine, snippet_id))


@router.post(
    "", response_model=SnippetResponse, status_code=status.HTTP_201_CREATED,
)
async def create_snippet(
    body: SnippetCreate, engine: SnippetEngine = Depends(get_engine),
):
    """Add a snippet. 409 when the given id already exists."""
    snippet = new_snippet(
        title=body.title,
        language=body.language,
        code=body.code,
        now_ms=engine.now(),
        tags=body.tags,
        is_favorite=body.is_favorite,
        snippet_id=body.id,
    )
    await engine.dispatch(AddSnippet(snippet))
    logger.info("Snippet added", extra={"snippet_id": snippet.id})
    return SnippetResponse.from_snippet(snippet)


@router.put("/{snippet_id}", response_model=SnippetResponse)
async def update_snippet(
    snippet_id: str, body: SnippetUpdate, engine: SnippetEngine = Depends(get_engine),
):
    """Replace a snippet's fields; created_at is kept, updated_at refreshed."""
    current = _get_or_404(engine, snippet_id)
    replacement = Snippet(
        id=SnippetId(snippet_id),
        title=body.title,
        language=body.language,
        code=body.code,
        tags=tuple(body.tags),
        is_favorite=body.is_favorite,
        created_at=current.created_at,
        updated_at=Timestamp(current.updated_at),
    )
    state = await engine.dispatch(UpdateSnippet(replacement))
    return SnippetResponse.from_snippet(state.snippets[replacement.id])


@router.delete("/{snippet_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_snippet(snippet_id: str, engine: SnippetEngine = Depends(get_engine)):
    await engine.dispatch(DeleteSnippet(snippet_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{snippet_id}/favorite", response_model=SnippetResponse)
async def toggle_favorite(snippet_id: str, engine: SnippetEngine = Depends(get_engine)):
    _get_or_404(engine, snippet_id)
    state = await engine.dispatch(ToggleFavorite(snippet_id))
    return SnippetResponse.from_snippet(state.snippets[SnippetId(snippet_id)])
