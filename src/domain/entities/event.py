"""InstallmentEvent entity emitted once per completed operation."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4


class EventType(str, Enum):
    """Types of installment engine events."""

    PLAN_CREATED = "plan_created"
    ORDER_CHECKED_OUT = "order_checked_out"
    INSTALLMENT_ADJUSTED = "installment_adjusted"
    INSTALLMENT_PAID = "installment_paid"
    INSTALLMENT_UPDATED = "installment_updated"
    INSTALLMENT_DELETED = "installment_deleted"
    INSTALLMENTS_MARKED_OVERDUE = "installments_marked_overdue"


@dataclass(frozen=True)
class InstallmentEvent:
    """
    Structured record of a completed, committed operation.

    Events are published after the transaction commits, so a consumer
    never sees an event for a change that was rolled back.
    """

    event_type: EventType
    payload: dict[str, Any]
    order_id: Optional[UUID] = None
    actor_id: Optional[str] = None
    id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": str(self.id),
            "event_type": self.event_type.value,
            "order_id": str(self.order_id) if self.order_id else None,
            "actor_id": self.actor_id,
            "payload": self.payload,
            "occurred_at": self.occurred_at.isoformat() + "Z",
        }
