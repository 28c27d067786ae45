"""Pydantic schemas for API request/response validation."""

from .error import ErrorResponseSchema
from .installment import (
    InstallmentSchema,
    MarkOverdueResponseSchema,
    OverdueInstallmentSchema,
    OverdueListResponseSchema,
    RecordPaymentRequestSchema,
    UpdateInstallmentRequestSchema,
)
from .plan import (
    AdjustInstallmentRequestSchema,
    AdjustmentResponseSchema,
    BuildPlanRequestSchema,
    CheckoutRequestSchema,
    PlanResponseSchema,
)

__all__ = [
    "ErrorResponseSchema",
    "InstallmentSchema",
    "MarkOverdueResponseSchema",
    "OverdueInstallmentSchema",
    "OverdueListResponseSchema",
    "RecordPaymentRequestSchema",
    "UpdateInstallmentRequestSchema",
    "AdjustInstallmentRequestSchema",
    "AdjustmentResponseSchema",
    "BuildPlanRequestSchema",
    "CheckoutRequestSchema",
    "PlanResponseSchema",
]
