"""Order entity and its payment-related enums."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4


class PaymentType(str, Enum):
    ONE_TIME = "ONE_TIME"
    INSTALLMENT = "INSTALLMENT"


class OrderStatus(str, Enum):
    """
    Payment status of an order.

    PENDING_PAYMENT -> PAID | INSTALLMENT_ACTIVE
    INSTALLMENT_ACTIVE <-> PARTIALLY_PAID -> PAID_COMPLETE
    Any pre-terminal state -> CANCELLED (external trigger)
    """

    PENDING_PAYMENT = "PENDING_PAYMENT"
    PAID = "PAID"
    INSTALLMENT_ACTIVE = "INSTALLMENT_ACTIVE"
    PARTIALLY_PAID = "PARTIALLY_PAID"
    PAID_COMPLETE = "PAID_COMPLETE"
    CANCELLED = "CANCELLED"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_ORDER_STATUSES


TERMINAL_ORDER_STATUSES = frozenset(
    {OrderStatus.PAID, OrderStatus.PAID_COMPLETE, OrderStatus.CANCELLED}
)

ADJUSTABLE_ORDER_STATUSES = frozenset(
    {OrderStatus.INSTALLMENT_ACTIVE, OrderStatus.PARTIALLY_PAID}
)


@dataclass
class Order:
    """
    The priced unit of work being paid for.

    Amounts are integers in the smallest currency unit; there are no
    fractional units anywhere in the engine.
    """

    member_id: str
    branch_id: str
    total_amount: int
    status: OrderStatus = OrderStatus.PENDING_PAYMENT
    payment_type: PaymentType = PaymentType.ONE_TIME
    is_installment: bool = False
    paid_at: Optional[datetime] = None
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> dict:
        return {
            "order_id": str(self.id),
            "member_id": self.member_id,
            "branch_id": self.branch_id,
            "total_amount": self.total_amount,
            "status": self.status.value,
            "payment_type": self.payment_type.value,
            "is_installment": self.is_installment,
            "paid_at": self.paid_at.isoformat() + "Z" if self.paid_at else None,
        }
