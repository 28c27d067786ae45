"""Base domain exception."""

from typing import Any


class DomainException(Exception):
    """
    Base exception for all domain-level errors.

    Domain exceptions represent business rule violations or
    domain-specific error conditions. `details` carries computed values
    a caller can use to correct and retry the request.
    """

    def __init__(
        self,
        message: str,
        code: str = "DOMAIN_ERROR",
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)


class ValidationException(DomainException):
    """Raised when an input value is malformed or out of range."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            details=details,
        )


class NotFoundException(DomainException):
    """Raised when a referenced record does not exist."""


class PermissionDeniedException(DomainException):
    """Raised when the actor lacks the capability or scope for an operation."""

    def __init__(self, message: str = "Operation not permitted for this actor"):
        super().__init__(message=message, code="PERMISSION_DENIED")


class ConflictException(DomainException):
    """Raised when an operation is not valid in the current state."""

    def __init__(
        self,
        message: str,
        code: str = "CONFLICT",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message=message, code=code, details=details)


class InvariantViolationException(DomainException):
    """
    Raised when a post-condition check fails.

    Always fatal: the surrounding transaction is rolled back and nothing
    is persisted.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            code="INVARIANT_VIOLATION",
            details=details,
        )
