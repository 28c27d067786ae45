"""Data transfer objects for installment plan operations."""

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional
from uuid import UUID

from src.domain.entities import PaymentType

from .installment import InstallmentDTO


@dataclass(frozen=True)
class BuildPlanRequest:
    """Input data for building (or rebuilding) an order's plan."""

    order_id: UUID
    payment_type: PaymentType
    installment_count: Optional[int] = None
    first_payment_amount: Optional[int] = None
    start_date: Optional[date] = None

    def validate(self) -> List[str]:
        errors = []

        if self.payment_type == PaymentType.INSTALLMENT and self.installment_count is None:
            errors.append("installment_count is required for INSTALLMENT plans")

        if self.first_payment_amount is not None and self.first_payment_amount < 0:
            errors.append("first_payment_amount cannot be negative")

        return errors


@dataclass(frozen=True)
class CheckoutRequest:
    """Input data for completing an order's payment at checkout."""

    order_id: UUID
    payment_type: PaymentType
    installment_count: Optional[int] = None
    start_date: Optional[date] = None
    custom_plan: Dict[int, int] = field(default_factory=dict)

    def validate(self) -> List[str]:
        errors = []

        if self.payment_type == PaymentType.INSTALLMENT and self.installment_count is None:
            errors.append("installment_count is required for INSTALLMENT checkout")

        if self.payment_type == PaymentType.ONE_TIME and self.custom_plan:
            errors.append("custom_plan is only valid for INSTALLMENT checkout")

        return errors


@dataclass(frozen=True)
class AdjustmentRequest:
    """Input data for changing one installment's amount."""

    order_id: UUID
    installment_no: int
    new_amount: int

    def validate(self) -> List[str]:
        errors = []

        if self.installment_no < 1:
            errors.append("installment_no must be at least 1")

        if isinstance(self.new_amount, bool) or not isinstance(self.new_amount, int):
            errors.append("new_amount must be an integer")
        elif self.new_amount <= 0:
            errors.append("new_amount must be positive")

        return errors


@dataclass(frozen=True)
class PlanResponse:
    """An order's payment state and its installments."""

    order_id: str
    member_id: str
    branch_id: str
    total_amount: int
    status: str
    payment_type: str
    is_installment: bool
    paid_at: Optional[str]
    paid_amount: int
    outstanding_amount: int
    installments: List[InstallmentDTO]

    @classmethod
    def from_entities(cls, order, installments) -> "PlanResponse":
        ordered = sorted(installments, key=lambda i: i.installment_no)
        paid_amount = sum(i.amount for i in ordered if i.is_paid)

        if order.is_installment:
            outstanding = order.total_amount - paid_amount
        else:
            outstanding = 0 if order.paid_at else order.total_amount

        return cls(
            order_id=str(order.id),
            member_id=order.member_id,
            branch_id=order.branch_id,
            total_amount=order.total_amount,
            status=order.status.value,
            payment_type=order.payment_type.value,
            is_installment=order.is_installment,
            paid_at=order.paid_at.isoformat() + "Z" if order.paid_at else None,
            paid_amount=paid_amount,
            outstanding_amount=outstanding,
            installments=[InstallmentDTO.from_entity(i) for i in ordered],
        )


@dataclass(frozen=True)
class AdjustmentResponse:
    """Updated plan plus the figures behind the redistribution."""

    plan: PlanResponse
    paid_sum: int
    locked_unpaid_sum: int
    remaining: int
    adjustable_count: int
    rounding_correction: int

    @classmethod
    def from_outcome(cls, order, outcome) -> "AdjustmentResponse":
        breakdown = outcome.breakdown
        return cls(
            plan=PlanResponse.from_entities(order, outcome.installments),
            paid_sum=breakdown.paid_sum,
            locked_unpaid_sum=breakdown.locked_unpaid_sum,
            remaining=breakdown.remaining,
            adjustable_count=breakdown.adjustable_count,
            rounding_correction=breakdown.rounding_correction,
        )
