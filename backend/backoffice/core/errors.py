"""Error Hierarchy — typed, categorized exceptions for all back office failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_problem() produces the problem-details body (type, title, status, detail, code)
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with LibraryError base: one FastAPI handler catches all
    - ErrorContext as dataclass: observability data travels with the error, not in the message
    - ValidationFailedError groups violations by field label, preserving rule order
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Iterable


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
    DATABASE = "database"
    INTERNAL = "internal"
    CONFLICT = "conflict"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    entity: str | None = None
    entity_id: Any = None
    operation: str | None = None
    debug_info: dict[str, Any] | None = None


PROBLEM_TYPES: dict[int, str] = {
    400: "https://tools.ietf.org/html/rfc9110#section-15.5.1",
    404: "https://tools.ietf.org/html/rfc9110#section-15.5.5",
    409: "https://tools.ietf.org/html/rfc9110#section-15.5.10",
    500: "https://tools.ietf.org/html/rfc9110#section-15.6.1",
    503: "https://tools.ietf.org/html/rfc9110#section-15.6.4",
}


class LibraryError(Exception):
    """Base exception for all back office errors."""

    title = "An unexpected error occurred"

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

    def to_problem(self) -> dict:
        """Convert to a problem-details response body."""
        return {
            "type": PROBLEM_TYPES.get(self.http_status, PROBLEM_TYPES[500]),
            "title": self.title,
            "status": self.http_status,
            "detail": self.message,
            "code": self.code,
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class ValidationFailedError(LibraryError):
    """One or more validation rules rejected the input."""

    title = "Validation failed"

    def __init__(
        self, errors: dict[str, list[str]], context: ErrorContext | None = None,
    ):
        count = sum(len(msgs) for msgs in errors.values())
        super().__init__(
            f"{count} validation error(s) on {', '.join(errors)}",
            "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.errors = errors

    @classmethod
    def from_violations(
        cls, violations: Iterable[tuple[str, str]],
        context: ErrorContext | None = None,
    ) -> "ValidationFailedError":
        """Group (field, message) pairs by field, keeping first-seen order."""
        grouped: dict[str, list[str]] = {}
        for field_name, message in violations:
            grouped.setdefault(field_name, []).append(message)
        return cls(grouped, context)

    def to_problem(self) -> dict:
        problem = super().to_problem()
        problem.pop("detail")
        problem["errors"] = self.errors
        return problem


class BusinessRuleError(LibraryError):
    """A well-formed request that the current domain state refuses."""

    title = "Operation not allowed"

    def __init__(
        self, message: str, code: str = "BUSINESS_RULE_VIOLATION",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, context, 400,
        )


class ResourceNotFoundError(LibraryError):
    """Requested resource does not exist."""

    title = "Not found"

    def __init__(
        self, resource_type: str, resource_id: Any,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.entity = resource_type
        ctx.entity_id = resource_id
        super().__init__(
            f"{resource_type} with id {resource_id} was not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, ctx, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class ConflictError(LibraryError):
    """Write collides with existing state (duplicate key, dependent rows)."""

    title = "Conflict"

    def __init__(
        self, message: str, code: str = "CONFLICT",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(LibraryError):
    """Database operation failed."""

    title = "Database unavailable"

    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.operation = operation
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, ctx, 503,
        )
        self.operation = operation
