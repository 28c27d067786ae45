"""Data Transfer Objects for application layer."""

from .installment import (
    InstallmentDTO,
    MarkOverdueResponse,
    OverdueInstallmentDTO,
    RecordPaymentRequest,
    UpdateInstallmentRequest,
)
from .plan import (
    AdjustmentRequest,
    AdjustmentResponse,
    BuildPlanRequest,
    CheckoutRequest,
    PlanResponse,
)

__all__ = [
    "InstallmentDTO",
    "MarkOverdueResponse",
    "OverdueInstallmentDTO",
    "RecordPaymentRequest",
    "UpdateInstallmentRequest",
    "AdjustmentRequest",
    "AdjustmentResponse",
    "BuildPlanRequest",
    "CheckoutRequest",
    "PlanResponse",
]
