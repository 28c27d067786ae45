"""Installment entity: one scheduled partial payment of an order."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4


class InstallmentStatus(str, Enum):
    UNPAID = "UNPAID"
    PAID = "PAID"
    OVERDUE = "OVERDUE"
    CANCELLED = "CANCELLED"


@dataclass
class Installment:
    """
    A single scheduled payment within an order's plan.

    `is_custom` marks an amount fixed by a human that automatic
    redistribution must leave alone. `auto_adjusted` is informational:
    the amount was last written by the redistribution algorithm.
    """

    order_id: UUID
    installment_no: int
    due_date: date
    amount: int
    status: InstallmentStatus = InstallmentStatus.UNPAID
    paid_at: Optional[datetime] = None
    payment_method: Optional[str] = None
    notes: Optional[str] = None
    is_custom: bool = False
    auto_adjusted: bool = False
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def is_paid(self) -> bool:
        return self.status == InstallmentStatus.PAID

    def to_dict(self) -> dict:
        return {
            "installment_id": str(self.id),
            "order_id": str(self.order_id),
            "installment_no": self.installment_no,
            "due_date": self.due_date.isoformat(),
            "amount": self.amount,
            "status": self.status.value,
            "paid_at": self.paid_at.isoformat() + "Z" if self.paid_at else None,
            "payment_method": self.payment_method,
            "notes": self.notes,
            "is_custom": self.is_custom,
            "auto_adjusted": self.auto_adjusted,
        }


@dataclass(frozen=True)
class OverdueInstallmentView:
    """Overdue installment joined with its order and member, for reporting."""

    installment: Installment
    order_total_amount: int
    order_status: str
    member_id: str
    member_name: Optional[str]
    branch_id: str
