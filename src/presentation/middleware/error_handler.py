"""Error handling middleware and exception handlers."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import structlog

from src.core.metrics import record_rejection
from src.domain.exceptions import (
    DomainException,
    ValidationException,
    NotFoundException,
    PermissionDeniedException,
    ConflictException,
    InvariantViolationException,
)
from .request_context import get_request_id

logger = structlog.get_logger(__name__)


def _error_response(status_code: int, exc: DomainException) -> JSONResponse:
    content = {
        "error": exc.code,
        "message": exc.message,
        "request_id": get_request_id(),
    }
    if exc.details:
        content["details"] = exc.details

    return JSONResponse(status_code=status_code, content=content)


def error_handler_middleware(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI app.

    Maps domain exceptions to appropriate HTTP responses. Handlers are
    resolved by exception class, so subclasses such as
    AdjustmentBudgetExceededException land on the ConflictException
    handler.
    """

    @app.exception_handler(ValidationException)
    async def validation_handler(
        request: Request,
        exc: ValidationException,
    ) -> JSONResponse:
        """Handle invalid input."""
        record_rejection(exc.code)
        return _error_response(422, exc)

    @app.exception_handler(NotFoundException)
    async def not_found_handler(
        request: Request,
        exc: NotFoundException,
    ) -> JSONResponse:
        """Handle missing orders and installments."""
        record_rejection(exc.code)
        return _error_response(404, exc)

    @app.exception_handler(PermissionDeniedException)
    async def permission_denied_handler(
        request: Request,
        exc: PermissionDeniedException,
    ) -> JSONResponse:
        """Handle actors outside their role or scope."""
        logger.warning(
            "permission_denied",
            request_id=get_request_id(),
            path=request.url.path,
            message=exc.message,
        )
        record_rejection(exc.code)
        return _error_response(403, exc)

    @app.exception_handler(ConflictException)
    async def conflict_handler(
        request: Request,
        exc: ConflictException,
    ) -> JSONResponse:
        """Handle requests the current plan state cannot accept."""
        logger.info(
            "operation_conflict",
            request_id=get_request_id(),
            code=exc.code,
            details=exc.details,
        )
        record_rejection(exc.code)
        return _error_response(409, exc)

    @app.exception_handler(InvariantViolationException)
    async def invariant_violation_handler(
        request: Request,
        exc: InvariantViolationException,
    ) -> JSONResponse:
        """Handle a sum invariant that could not be restored; nothing was written."""
        logger.error(
            "invariant_violation",
            request_id=get_request_id(),
            message=exc.message,
            details=exc.details,
        )
        record_rejection(exc.code)
        return _error_response(500, exc)

    @app.exception_handler(DomainException)
    async def domain_exception_handler(
        request: Request,
        exc: DomainException,
    ) -> JSONResponse:
        """Handle generic domain exceptions."""
        logger.warning(
            "domain_exception",
            request_id=get_request_id(),
            code=exc.code,
            message=exc.message,
        )
        record_rejection(exc.code)
        return _error_response(400, exc)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception(
            "unhandled_exception",
            request_id=get_request_id(),
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": "INTERNAL_ERROR",
                "message": "An unexpected error occurred.",
                "request_id": get_request_id(),
            },
        )
