"""Order payment status derived from its installments."""

from typing import Iterable

from src.domain.entities import Installment, InstallmentStatus, OrderStatus


def derive_order_status(
    installments: Iterable[Installment],
    current: OrderStatus,
) -> OrderStatus:
    """
    Map the multiset of installment statuses to the order status.

    - all PAID -> PAID_COMPLETE
    - some PAID -> PARTIALLY_PAID
    - none PAID -> `current` (INSTALLMENT_ACTIVE / PENDING_PAYMENT)

    CANCELLED installments do not count towards completion.
    """
    active = [i for i in installments if i.status != InstallmentStatus.CANCELLED]
    if not active:
        return current

    paid = sum(1 for i in active if i.is_paid)

    if paid == len(active):
        return OrderStatus.PAID_COMPLETE
    if paid > 0:
        return OrderStatus.PARTIALLY_PAID
    return current
