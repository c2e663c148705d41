"""Translate domain errors into HTTP responses."""

import logfire
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from forum.domain.error import (
    AlreadyExistsError,
    BusinessRuleViolationError,
    ConcurrentUpdateConflict,
    ContentDeletedException,
    DomainError,
    DuplicateVote,
    NotAuthorizedError,
    NotFoundError,
    PostLockedError,
    ValidationError,
)

# Checked in order, so subclasses come before their bases
ERROR_STATUS: list[tuple[type[DomainError], int]] = [
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (PostLockedError, status.HTTP_403_FORBIDDEN),
    (BusinessRuleViolationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (NotAuthorizedError, status.HTTP_403_FORBIDDEN),
    (ContentDeletedException, status.HTTP_410_GONE),
    (ConcurrentUpdateConflict, status.HTTP_409_CONFLICT),
    (AlreadyExistsError, status.HTTP_409_CONFLICT),
    (DuplicateVote, status.HTTP_500_INTERNAL_SERVER_ERROR),
]


def status_for(error: DomainError) -> int:
    """HTTP status code of a domain error (500 if unmapped)."""
    for error_type, status_code in ERROR_STATUS:
        if isinstance(error, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def setup_error_handlers(app: FastAPI) -> None:
    """Register the domain error handler."""

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
        """Respond with the mapped status and the error message."""
        status_code = status_for(exc)
        if status_code >= 500:
            logfire.error(
                "Domain invariant violated",
                path=request.url.path,
                method=request.method,
                error_type=type(exc).__name__,
                error=str(exc),
            )
            detail = "Internal server error"
        else:
            logfire.warn(
                "Request rejected",
                path=request.url.path,
                method=request.method,
                error_type=type(exc).__name__,
                error=str(exc),
            )
            detail = str(exc)

        return JSONResponse(
            status_code=status_code,
            content={"detail": detail, "error": type(exc).__name__},
        )

    @app.exception_handler(PydanticValidationError)
    async def model_validation_handler(
        request: Request, exc: PydanticValidationError
    ) -> JSONResponse:
        """Value objects built from path or query strings failed validation."""
        logfire.warn(
            "Invalid request value", path=request.url.path, errors=exc.error_count()
        )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "detail": "Validation error",
                "errors": exc.errors(include_url=False, include_context=False),
            },
        )
