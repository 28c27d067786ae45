"""Installment-related domain exceptions."""

from .base import ConflictException, NotFoundException


class InstallmentNotFoundException(NotFoundException):
    """Raised when an installment cannot be found."""

    def __init__(self, reference: str):
        super().__init__(
            message=f"Installment not found: {reference}",
            code="INSTALLMENT_NOT_FOUND",
        )
        self.reference = reference


class InstallmentAlreadyPaidException(ConflictException):
    """Raised when a change targets an installment that is already PAID."""

    def __init__(self, installment_no: int):
        super().__init__(
            message=f"Installment {installment_no} is already paid",
            code="INSTALLMENT_ALREADY_PAID",
            details={"installment_no": installment_no},
        )


class InstallmentStateException(ConflictException):
    """Raised when an installment's status forbids the requested change."""

    def __init__(self, installment_no: int, status: str, operation: str):
        super().__init__(
            message=f"Installment {installment_no} is {status}; cannot {operation}",
            code="INSTALLMENT_STATUS_CONFLICT",
            details={"installment_no": installment_no, "status": status},
        )


class AdjustmentBudgetExceededException(ConflictException):
    """Raised when a new amount leaves no room for the rest of the plan."""

    def __init__(self, new_amount: int, max_allowed_amount: int):
        super().__init__(
            message=(
                f"Amount {new_amount} exceeds the maximum allowed "
                f"amount {max_allowed_amount}"
            ),
            code="ADJUSTMENT_BUDGET_EXCEEDED",
            details={
                "new_amount": new_amount,
                "max_allowed_amount": max_allowed_amount,
            },
        )
        self.max_allowed_amount = max_allowed_amount


class ResidualMismatchException(ConflictException):
    """Raised when no installment is free to absorb a non-zero residual."""

    def __init__(self, new_amount: int, required_amount: int):
        super().__init__(
            message=(
                "No adjustable installments remain; the amount must be "
                f"exactly {required_amount} (got {new_amount})"
            ),
            code="RESIDUAL_MISMATCH",
            details={
                "new_amount": new_amount,
                "required_amount": required_amount,
            },
        )
        self.required_amount = required_amount
