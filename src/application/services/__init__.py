"""Application services (use cases)."""

from .adjustment_service import AdjustmentService
from .installment_service import InstallmentService
from .overdue_service import OverdueService
from .plan_service import PlanService

__all__ = [
    "AdjustmentService",
    "InstallmentService",
    "OverdueService",
    "PlanService",
]
