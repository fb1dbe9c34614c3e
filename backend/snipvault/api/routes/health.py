"""Health & Readiness Probes — liveness and storage readiness.

Invariants:
    - GET /health/ always returns 200 if process is up (liveness)
    - GET /health/ready returns 503 if the snippet storage is unreachable
"""

import logging
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from snipvault.api.dependencies import get_engine
from snipvault.services.snippet_engine import SnippetEngine

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Basic liveness probe. Returns 200 if the process is up."""
    return {
        "status": "healthy",
        "service": "snipvault",
        "version": "1.0.0",
    }


@router.get("/ready")
async def readiness_check(engine: SnippetEngine = Depends(get_engine)):
    """Readiness probe — includes storage connectivity."""
    if not await engine.storage_ready():
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "storage_unavailable",
            },
        )
    return {"status": "ready", "checks": {"storage": "healthy"}}
