"""Domain Entities - Core business objects."""

from .actor import Actor, Role
from .event import EventType, InstallmentEvent
from .installment import Installment, InstallmentStatus, OverdueInstallmentView
from .member import Member
from .order import (
    ADJUSTABLE_ORDER_STATUSES,
    TERMINAL_ORDER_STATUSES,
    Order,
    OrderStatus,
    PaymentType,
)

__all__ = [
    "Actor",
    "Role",
    "EventType",
    "InstallmentEvent",
    "Installment",
    "InstallmentStatus",
    "OverdueInstallmentView",
    "Member",
    "ADJUSTABLE_ORDER_STATUSES",
    "TERMINAL_ORDER_STATUSES",
    "Order",
    "OrderStatus",
    "PaymentType",
]
