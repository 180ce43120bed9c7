"""Error Handlers — global exception handlers rendering problem-details bodies.

Invariants:
    - LibraryError -> application/problem+json with type, title, status, detail, code
    - RequestValidationError -> 400 "Validation failed" with errors keyed by field label,
      the same shape the domain validators produce; the body's rule set still runs over
      the fields that passed, so one response lists every violation
    - IntegrityError reaching the boundary -> 409 Conflict
    - Exception (catch-all) -> 500 without internal details, logged with traceback

Design Decisions:
    - Four-layer handler: domain (LibraryError), request shape (Pydantic), integrity
      (SQLAlchemy), catch-all (Exception)
    - Extracted from main.py to keep the entry point a plain wiring module
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from backoffice.core.errors import (
    PROBLEM_TYPES, ConflictError, ErrorSeverity, LibraryError,
    ValidationFailedError,
)
from backoffice.core.validation import shape_violations
from backoffice.handlers.body_rules import partial_body_violations

logger = logging.getLogger(__name__)

PROBLEM_MEDIA_TYPE = "application/problem+json"


def problem_response(status_code: int, body: dict) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content=body, media_type=PROBLEM_MEDIA_TYPE,
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_library_error_handler(app)
    _register_validation_error_handler(app)
    _register_integrity_error_handler(app)
    _register_generic_error_handler(app)


def _register_library_error_handler(app: FastAPI) -> None:
    """Register domain/infrastructure error handler."""

    @app.exception_handler(LibraryError)
    async def library_error_handler(request: Request, exc: LibraryError):
        """Handle all library domain/infrastructure errors."""
        log = logger.error if exc.severity == ErrorSeverity.CRITICAL else logger.warning
        log(
            f"{type(exc).__name__}: {exc.message}",
            extra={
                "error_code": exc.code,
                "path": request.url.path,
                "method": request.method,
                "status_code": exc.http_status,
            },
        )
        return problem_response(exc.http_status, exc.to_problem())


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle request-shape errors in the same body as rule violations."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
            extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
        )
        violations = shape_violations(exc.errors())
        reported = {v.field for v in violations}
        violations += [
            v for v in _body_rule_violations(request, exc)
            if v.field not in reported
        ]
        error = ValidationFailedError.from_violations(violations)
        return problem_response(status.HTTP_400_BAD_REQUEST, error.to_problem())


def _body_model(request: Request) -> type | None:
    """The pydantic model of the matched route's single JSON body, if any."""
    route = request.scope.get("route")
    dependant = getattr(route, "dependant", None)
    if dependant is None or len(dependant.body_params) != 1:
        return None
    annotation = dependant.body_params[0].field_info.annotation
    return annotation if isinstance(annotation, type) else None


def _body_rule_violations(request: Request, exc: RequestValidationError) -> list:
    model = _body_model(request)
    if model is None:
        return []
    rejected = {
        str(error["loc"][1]) for error in exc.errors()
        if len(error.get("loc", ())) > 1 and error["loc"][0] == "body"
    }
    return partial_body_violations(model, exc.body, rejected)


def _register_integrity_error_handler(app: FastAPI) -> None:
    """Register database integrity violation handler."""

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError):
        """A unique or foreign-key constraint rejected the write."""
        logger.warning(
            f"Integrity error on {request.url.path}: {exc.orig}",
            extra={"error_code": "INTEGRITY_VIOLATION", "path": request.url.path},
        )
        error = ConflictError(
            "The change conflicts with existing data", "INTEGRITY_VIOLATION",
        )
        return problem_response(status.HTTP_409_CONFLICT, error.to_problem())


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all: never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
            extra={"path": request.url.path, "method": request.method},
        )
        return problem_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            {
                "type": PROBLEM_TYPES[500],
                "title": "An unexpected error occurred",
                "status": 500,
            },
        )
