"""Error Hierarchy — typed, categorized exceptions for all SnipVault failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are not
    - to_response() produces the REST envelope
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with SnipVaultError base: FastAPI global handler catches all
    - Codec and persistence failures carry a `kind` enum so callers can branch
      without parsing messages
    - ErrorContext as dataclass: rich observability without coupling to logging
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone

from snipvault.core.domain_types import (
    ClipboardKind, PersistenceKind, ValidationKind,
)


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    PERSISTENCE = "persistence"
    DATABASE = "database"
    CLIPBOARD = "clipboard"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    snippet_id: str | None = None
    action: str | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None


class SnipVaultError(Exception):
    """Base exception for all SnipVault errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.context.user_message or self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "snippet_id": self.context.snippet_id,
                    "action": self.context.action,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class SnippetValidationError(SnipVaultError):
    """External payload failed decoding or structural validation."""
    def __init__(
        self,
        kind: ValidationKind,
        message: str,
        details: list[str] | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 422,
        )
        self.kind = kind
        self.details = details or []

    def to_response(self) -> dict:
        response = super().to_response()
        response["error"]["kind"] = self.kind.value
        response["error"]["details"] = self.details
        return response


class DuplicateIdError(SnipVaultError):
    """AddSnippet attempted with an id already in the collection."""
    def __init__(self, snippet_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.snippet_id = snippet_id
        super().__init__(
            f"Snippet '{snippet_id}' already exists",
            "DUPLICATE_ID", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, ctx, 409,
        )
        self.snippet_id = snippet_id


class UnknownActionError(SnipVaultError):
    """Transition received an action outside the closed action set."""
    def __init__(self, action: object, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.action = type(action).__name__
        super().__init__(
            f"Unrecognized action: {type(action).__name__}",
            "UNKNOWN_ACTION", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, ctx, 400,
        )


class ResourceNotFoundError(SnipVaultError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


class ClipboardError(SnipVaultError):
    """Clipboard collaborator could not copy a snippet."""
    def __init__(self, kind: ClipboardKind, context: ErrorContext | None = None):
        message = {
            ClipboardKind.PERMISSION_DENIED: "Clipboard access was denied",
            ClipboardKind.UNSUPPORTED: "Clipboard is not available on this platform",
        }[kind]
        super().__init__(
            message, "CLIPBOARD_ERROR", ErrorCategory.CLIPBOARD,
            ErrorSeverity.WARNING, context, 400,
        )
        self.kind = kind


# ─── Infrastructure Errors (500-level) ──────────────────────────

class PersistenceError(SnipVaultError):
    """Persistent store could not load or save the collection."""
    def __init__(
        self, kind: PersistenceKind, message: str, context: ErrorContext | None = None,
    ):
        status = 507 if kind == PersistenceKind.QUOTA_EXCEEDED else 503
        super().__init__(
            message, f"PERSISTENCE_{kind.name}", ErrorCategory.PERSISTENCE,
            ErrorSeverity.CRITICAL, context, status,
        )
        self.kind = kind


class QuotaExceededError(SnipVaultError):
    """Medium refused a value larger than its quota. Nothing was written."""
    def __init__(self, size: int, quota: int, context: ErrorContext | None = None):
        super().__init__(
            f"Value of {size} bytes exceeds quota of {quota} bytes",
            "QUOTA_EXCEEDED", ErrorCategory.PERSISTENCE,
            ErrorSeverity.CRITICAL, context, 507,
        )
        self.size = size
        self.quota = quota


class DatabaseError(SnipVaultError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
