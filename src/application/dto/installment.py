"""Data transfer objects for single-installment operations."""

from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional
from uuid import UUID


@dataclass(frozen=True)
class InstallmentDTO:
    """Single installment within a plan response."""

    installment_id: str
    installment_no: int
    due_date: str
    amount: int
    status: str
    paid_at: Optional[str]
    payment_method: Optional[str]
    notes: Optional[str]
    is_custom: bool
    auto_adjusted: bool

    @classmethod
    def from_entity(cls, installment) -> "InstallmentDTO":
        return cls(
            installment_id=str(installment.id),
            installment_no=installment.installment_no,
            due_date=installment.due_date.isoformat(),
            amount=installment.amount,
            status=installment.status.value,
            paid_at=installment.paid_at.isoformat() + "Z" if installment.paid_at else None,
            payment_method=installment.payment_method,
            notes=installment.notes,
            is_custom=installment.is_custom,
            auto_adjusted=installment.auto_adjusted,
        )


@dataclass(frozen=True)
class RecordPaymentRequest:
    """Input data for recording the payment of one installment."""

    installment_id: UUID
    payment_method: str
    paid_at: Optional[datetime] = None
    notes: Optional[str] = None

    def validate(self) -> List[str]:
        errors = []

        if not self.payment_method or not self.payment_method.strip():
            errors.append("payment_method is required")

        return errors


@dataclass(frozen=True)
class UpdateInstallmentRequest:
    """
    Input data for a direct installment edit.

    The amount is deliberately absent: it only changes through an
    adjustment, which keeps the plan total intact.
    """

    installment_id: UUID
    due_date: Optional[date] = None
    notes: Optional[str] = None

    def validate(self) -> List[str]:
        errors = []

        if self.due_date is None and self.notes is None:
            errors.append("at least one of due_date or notes is required")

        return errors


@dataclass(frozen=True)
class OverdueInstallmentDTO:
    """Overdue installment with the order context needed for follow-up."""

    installment: InstallmentDTO
    order_id: str
    order_total_amount: int
    order_status: str
    member_id: str
    member_name: Optional[str]
    branch_id: str

    @classmethod
    def from_view(cls, view) -> "OverdueInstallmentDTO":
        return cls(
            installment=InstallmentDTO.from_entity(view.installment),
            order_id=str(view.installment.order_id),
            order_total_amount=view.order_total_amount,
            order_status=view.order_status,
            member_id=view.member_id,
            member_name=view.member_name,
            branch_id=view.branch_id,
        )


@dataclass(frozen=True)
class MarkOverdueResponse:
    """Result of an overdue sweep."""

    marked_count: int
    as_of: str
