"""Error Handlers — every failure leaves the API in the SnipVaultError envelope.

Invariants:
    - Domain errors keep their own status and code; SnippetValidationError
      responses carry `kind` and `details` (the import rejection reasons)
    - Malformed requests answer 400 INVALID_REQUEST with "field: message"
      details, the same detail format the import codec produces
    - Anything else answers 500 INTERNAL_ERROR and never leaks internals

Design Decisions:
    - One envelope (SnipVaultError.to_response) for all three paths, so clients
      parse a single error shape
    - Log records carry the offending snippet id and action when the error has them
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from snipvault.core.errors import ErrorCategory, ErrorSeverity, SnipVaultError

logger = logging.getLogger(__name__)

_REQUEST_SECTIONS = ("body", "query", "path", "header")


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SnipVaultError, handle_snipvault_error)
    app.add_exception_handler(RequestValidationError, handle_invalid_request)
    app.add_exception_handler(Exception, handle_unexpected_error)


async def handle_snipvault_error(request: Request, exc: SnipVaultError) -> JSONResponse:
    log = logger.warning if exc.http_status < 500 else logger.error
    log(
        exc.message,
        extra={
            "error_code": exc.code,
            "path": request.url.path,
            "snippet_id": exc.context.snippet_id,
            "action": exc.context.action,
        },
    )
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


async def handle_invalid_request(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    """Request body/query failed schema validation (before reaching the engine)."""
    details = [_describe_field(e) for e in exc.errors()]
    logger.warning(
        f"Rejected request: {'; '.join(details)}",
        extra={"error_code": "INVALID_REQUEST", "path": request.url.path},
    )
    error = SnipVaultError(
        "Request data is invalid", "INVALID_REQUEST",
        ErrorCategory.VALIDATION, ErrorSeverity.WARNING, http_status=400,
    )
    content = error.to_response()
    content["error"]["details"] = details
    return JSONResponse(status_code=error.http_status, content=content)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled {type(exc).__name__} on {request.url.path}",
        exc_info=exc,
        extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
    )
    error = SnipVaultError(
        "An unexpected error occurred", "INTERNAL_ERROR",
        ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL,
    )
    return JSONResponse(status_code=error.http_status, content=error.to_response())


def _describe_field(error: dict) -> str:
    loc = [str(p) for p in error["loc"]]
    if loc and loc[0] in _REQUEST_SECTIONS:
        loc = loc[1:]
    return f"{'.'.join(loc) or '<body>'}: {error['msg']}"
