"""Transfer Routes — JSON backup export and validated import.

Invariants:
    - Export body is exactly engine.export_current_collection()
    - Import is all-or-nothing: a rejected payload leaves the collection untouched
    - Non-UTF-8 bodies are rejected as MALFORMED_ENCODING before parsing

Design Decisions:
    - Import takes the raw request body (not a JSON schema) so the codec, not
      FastAPI, decides what a malformed payload is
    - Default mode is merge: importing a backup never silently drops snippets
"""

import logging

from fastapi import APIRouter, Depends, Query, Request, Response

from snipvault.api.dependencies import get_engine
from snipvault.core.domain_types import ImportMode, ValidationKind
from snipvault.core.errors import SnippetValidationError
from snipvault.services.snippet_engine import SnippetEngine

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/transfer", tags=["transfer"])


@router.get("/export")
async def export_snippets(engine: SnippetEngine = Depends(get_engine)):
    """Download the whole collection as a JSON document."""
    return Response(
        content=engine.export_current_collection(),
        media_type="application/json",
        headers={"Content-Disposition": 'attachment; filename="snippets.json"'},
    )


@router.post("/import")
async def import_snippets(
    request: Request,
    mode: ImportMode = Query(ImportMode.MERGE),
    engine: SnippetEngine = Depends(get_engine),
):
    """Validate and apply an exported payload (replace or merge)."""
    raw = await request.body()
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise SnippetValidationError(
            ValidationKind.MALFORMED_ENCODING, "Payload is not UTF-8 text",
        ) from e

    result = await engine.import_collection(text, mode)
    if not result.ok:
        raise result.error
    return {
        "mode": result.mode.value,
        "imported": result.imported,
        "total": engine.state.size,
        "save_status": result.save.status.value if result.save else None,
    }
