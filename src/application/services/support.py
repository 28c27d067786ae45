"""Access checks and order bookkeeping shared by the application services."""

from datetime import datetime
from typing import Iterable, Optional
from uuid import UUID

from src.domain.entities import Actor, Installment, Order, OrderStatus
from src.domain.exceptions import OrderNotFoundException, PermissionDeniedException
from src.domain.interfaces import AccessGate, UnitOfWork
from src.service.installments import derive_order_status


def require_privileged(gate: AccessGate, actor: Actor) -> None:
    if not gate.is_privileged(actor):
        raise PermissionDeniedException(
            f"Role {actor.role.value} cannot perform this operation"
        )


def require_order_access(gate: AccessGate, actor: Actor, order: Order) -> None:
    if not gate.can_read_order(actor, order):
        raise PermissionDeniedException(f"Order {order.id} is outside the actor's scope")


async def lock_order(uow: UnitOfWork, order_id: UUID) -> Order:
    """Load an order FOR UPDATE, or raise OrderNotFoundException."""
    order = await uow.orders.get_by_id(order_id, for_update=True)
    if order is None:
        raise OrderNotFoundException(str(order_id))
    return order


def sync_order_status(
    order: Order,
    installments: Iterable[Installment],
    paid_at: Optional[datetime] = None,
) -> bool:
    """
    Bring order.status in line with its installments.

    Returns:
        True if the order changed and needs writing back
    """
    new_status = derive_order_status(installments, order.status)
    if new_status == order.status:
        return False

    order.status = new_status
    if new_status == OrderStatus.PAID_COMPLETE:
        order.paid_at = paid_at or datetime.utcnow()
    return True
