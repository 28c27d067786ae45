"""Domain Exceptions - Business rule violations and domain errors."""

from .base import (
    ConflictException,
    DomainException,
    InvariantViolationException,
    NotFoundException,
    PermissionDeniedException,
    ValidationException,
)
from .installment import (
    AdjustmentBudgetExceededException,
    InstallmentAlreadyPaidException,
    InstallmentNotFoundException,
    InstallmentStateException,
    ResidualMismatchException,
)
from .order import (
    OrderNotAdjustableException,
    OrderNotFoundException,
    PlanLockedException,
)

__all__ = [
    "ConflictException",
    "DomainException",
    "InvariantViolationException",
    "NotFoundException",
    "PermissionDeniedException",
    "ValidationException",
    "AdjustmentBudgetExceededException",
    "InstallmentAlreadyPaidException",
    "InstallmentNotFoundException",
    "InstallmentStateException",
    "ResidualMismatchException",
    "OrderNotAdjustableException",
    "OrderNotFoundException",
    "PlanLockedException",
]
