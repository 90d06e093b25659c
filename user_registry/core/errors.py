"""Error Hierarchy: typed, categorized exceptions for every user registry failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Client errors (400-level) carry a message safe to echo verbatim
    - Server errors (500-level) expose detail only outside production
    - to_response() produces the REST envelope {"error": <message>}

Design Decisions:
    - Single hierarchy with UserRegistryError base: one global handler maps all of them
    - ErrorContext as dataclass: observability data kept out of the response body
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
    INVALID_IDENTIFIER = "invalid_identifier"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    UNAVAILABLE = "unavailable"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Context attached to an error for logs, never serialized to clients."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: str | None = None
    operation: str | None = None
    debug_info: dict[str, Any] | None = None


class UserRegistryError(Exception):
    """Base exception for all user registry errors."""

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

    @property
    def is_client_error(self) -> bool:
        return self.http_status < 500

    def to_response(self, include_detail: bool = False) -> dict:
        """Convert to the REST error envelope."""
        body: dict[str, Any] = {"error": self.message}
        if include_detail and not self.is_client_error and self.context.debug_info:
            body["detail"] = self.context.debug_info.get("detail")
        return body


# ─── Client Errors (400-level) ──────────────────────────────────

class InvalidInputError(UserRegistryError):
    """Request body or query failed validation."""
    def __init__(self, message: str, field: str | None = None, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.field = field


class InvalidIdentifierError(UserRegistryError):
    """Identifier is not a well-formed user id."""
    def __init__(self, raw_id: str, context: ErrorContext | None = None):
        super().__init__(
            "Invalid user id.", "INVALID_IDENTIFIER", ErrorCategory.INVALID_IDENTIFIER,
            ErrorSeverity.WARNING, context, 400,
        )
        self.raw_id = raw_id


class UserNotFoundError(UserRegistryError):
    """Identifier is well-formed but no record matches."""
    def __init__(self, user_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.user_id = user_id
        super().__init__(
            "User not found.", "USER_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.INFO, ctx, 404,
        )


class DuplicateEmailError(UserRegistryError):
    """Unique email constraint rejected an insert or update."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Email already exists.", "EMAIL_EXISTS", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseUnavailableError(UserRegistryError):
    """Database connection is not in the ready state."""
    def __init__(self, state: str, context: ErrorContext | None = None):
        super().__init__(
            "Database not connected", "DATABASE_UNAVAILABLE", ErrorCategory.UNAVAILABLE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.state = state


class DatabaseError(UserRegistryError):
    """Database operation failed unexpectedly."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.operation = operation
        ctx.debug_info = {"detail": f"Database {operation} failed: {message}"}
        super().__init__(
            "Internal Server Error", "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, ctx, 500,
        )
        self.operation = operation
