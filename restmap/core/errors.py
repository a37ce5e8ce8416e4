"""Error Hierarchy — typed, categorized exceptions for every RestMap failure mode.

Invariants:
    - Every error has a code (ErrorCode), category (ErrorCategory), severity (ErrorSeverity)
    - Store taxonomy is closed: NotFound, BadRequest, UnprocessableEntity
    - Errors never carry an HTTP status — the api/ boundary maps codes to statuses
    - NotFound message is always "<resource> does not exist"
    - BadRequest message for a missing body is always "Missing or invalid body"

Design Decisions:
    - Single hierarchy with RestMapError base: one FastAPI handler catches all
    - ErrorContext as dataclass: rich observability without coupling to logging framework
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
    RESOURCE_NOT_FOUND = "resource_not_found"
    AUTHENTICATION = "authentication"
    CONFIGURATION = "configuration"
    INTERNAL = "internal"


class ErrorCode(str, Enum):
    """Stable error codes surfaced to clients."""
    NOT_FOUND = "NotFound"
    BAD_REQUEST = "BadRequest"
    UNPROCESSABLE_ENTITY = "UnprocessableEntity"
    UNAUTHORIZED = "Unauthorized"
    CONFIGURATION = "ConfigurationError"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    resource: str | None = None
    record_id: str | None = None
    path: str | None = None
    debug_info: dict[str, Any] | None = None


class RestMapError(Exception):
    """Base exception for all RestMap errors."""

    def __init__(
        self,
        message: str,
        code: ErrorCode,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code.value,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "resource": self.context.resource,
                    "record_id": self.context.record_id,
                    "path": self.context.path,
                },
            }
        }


# ─── Store Taxonomy (recoverable) ───────────────────────────────

class StoreError(RestMapError):
    """Recoverable failure raised by the Store."""


class NotFoundError(StoreError):
    """No record with the given id exists for the resource."""
    def __init__(
        self, resource: str, record_id: Any = None, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.resource = resource
        ctx.record_id = None if record_id is None else str(record_id)
        super().__init__(
            f"{resource} does not exist",
            ErrorCode.NOT_FOUND, ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, ctx,
        )


class BadRequestError(StoreError):
    """Request body absent or not a well-formed attribute mapping."""
    MISSING_BODY = "Missing or invalid body"

    def __init__(
        self, message: str = MISSING_BODY, context: ErrorContext | None = None,
    ):
        super().__init__(
            message, ErrorCode.BAD_REQUEST, ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context,
        )


class UnprocessableEntityError(StoreError):
    """Body well-formed but rejected by persistence-engine field validation."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, ErrorCode.UNPROCESSABLE_ENTITY, ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context,
        )


# ─── Framework Errors ───────────────────────────────────────────

class AuthenticationError(RestMapError):
    """Bearer credential missing, malformed or rejected."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, ErrorCode.UNAUTHORIZED, ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context,
        )


class ConfigurationError(RestMapError):
    """Application wiring is inconsistent (unknown controller, model, action)."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, ErrorCode.CONFIGURATION, ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL, context,
        )
