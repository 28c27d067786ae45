"""
Installment Plan Engine - pure allocation, adjustment and status rules.
"""

from .settings import InstallmentSettings, installment_settings
from .allocation import (
    custom_plan_amounts,
    plan_amounts,
    require_positive_int,
    split_evenly,
    validate_installment_count,
)
from .adjustment import (
    AdjustmentBreakdown,
    AdjustmentOutcome,
    distribute,
    plan_adjustment,
    reconcile_total,
    round_half_up,
)
from .order_status import derive_order_status
from .schedule import due_dates

__all__ = [
    # Settings
    "InstallmentSettings",
    "installment_settings",
    # Allocation
    "custom_plan_amounts",
    "plan_amounts",
    "require_positive_int",
    "split_evenly",
    "validate_installment_count",
    # Adjustment
    "AdjustmentBreakdown",
    "AdjustmentOutcome",
    "distribute",
    "plan_adjustment",
    "reconcile_total",
    "round_half_up",
    # Status
    "derive_order_status",
    # Schedule
    "due_dates",
]
