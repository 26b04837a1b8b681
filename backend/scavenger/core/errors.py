"""Error Hierarchy: typed, categorized exceptions for every integrity failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Precondition failures (400/404/409) are recoverable; store failures (503) are critical
    - to_response() produces the REST envelope
    - Messages are human-readable; callers decide remediation from them

Design Decisions:
    - Single hierarchy with ScavengerError base: FastAPI global handler catches all
    - ValidationError subclasses InvalidStateError: a rejected parameter is also
      a rejected precondition, so `except InvalidStateError` covers both
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


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
    STORE = "store"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    operation: str | None = None
    entity: str | None = None
    entity_id: str | None = None
    path: str | None = None
    debug_info: dict[str, Any] | None = None


class ScavengerError(Exception):
    """Base exception for all scavenger integrity errors."""

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
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "operation": self.context.operation,
                    "entity": self.context.entity,
                    "entity_id": self.context.entity_id,
                    "path": self.context.path,
                },
            }
        }


# ─── Precondition Errors (400-level) ────────────────────────────

class NotFoundError(ScavengerError):
    """Referenced entity does not exist."""
    def __init__(
        self, entity: str, entity_id: str, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.entity = entity
        ctx.entity_id = entity_id
        super().__init__(
            f"{entity} '{entity_id}' not found",
            "NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )
        self.entity = entity
        self.entity_id = entity_id


class AlreadyExistsError(ScavengerError):
    """Create called on an id that is already taken."""
    def __init__(
        self, entity: str, entity_id: str, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.entity = entity
        ctx.entity_id = entity_id
        super().__init__(
            f"{entity} '{entity_id}' already exists",
            "ALREADY_EXISTS", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, ctx, 409,
        )
        self.entity = entity
        self.entity_id = entity_id


class InvalidStateError(ScavengerError):
    """A precondition or invariant would be violated by the operation."""
    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        code: str = "INVALID_STATE",
        category: ErrorCategory = ErrorCategory.BUSINESS_RULE,
        http_status: int = 409,
    ):
        super().__init__(
            message, code, category, ErrorSeverity.ERROR, context, http_status,
        )


class ValidationError(InvalidStateError):
    """A parameter is malformed (bad identifier, start not before end, ...)."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, context,
            code="VALIDATION_ERROR",
            category=ErrorCategory.VALIDATION,
            http_status=400,
        )
        self.field = field


# ─── Store Errors (500-level) ───────────────────────────────────

class StoreError(ScavengerError):
    """A key-value store call failed."""
    def __init__(
        self,
        message: str,
        operation: str,
        path: str | None = None,
        context: ErrorContext | None = None,
        code: str = "STORE_ERROR",
    ):
        ctx = context or ErrorContext()
        ctx.path = ctx.path or path
        super().__init__(
            f"Store {operation} failed: {message}",
            code, ErrorCategory.STORE,
            ErrorSeverity.CRITICAL, ctx, 503,
        )
        self.operation = operation
        self.path = path


class PartialCommitError(StoreError):
    """A write plan failed partway; applied steps were (maybe) compensated."""
    def __init__(
        self,
        failed_path: str,
        applied: int,
        compensated: bool,
        context: ErrorContext | None = None,
    ):
        outcome = "rolled back" if compensated else "left partially applied"
        super().__init__(
            f"write to '{failed_path}' failed after {applied} applied step(s); "
            f"changes were {outcome}",
            "commit", failed_path, context, code="PARTIAL_COMMIT",
        )
        self.failed_path = failed_path
        self.applied = applied
        self.compensated = compensated
