"""Order-related domain exceptions."""

from .base import ConflictException, NotFoundException


class OrderNotFoundException(NotFoundException):
    """Raised when an order cannot be found."""

    def __init__(self, order_id: str):
        super().__init__(
            message=f"Order not found: {order_id}",
            code="ORDER_NOT_FOUND",
        )
        self.order_id = order_id


class OrderNotAdjustableException(ConflictException):
    """Raised when the order status does not allow the requested change."""

    def __init__(self, order_id: str, status: str, operation: str = "adjust"):
        super().__init__(
            message=f"Order {order_id} is {status}; cannot {operation}",
            code="ORDER_STATUS_CONFLICT",
            details={"order_id": order_id, "status": status},
        )


class PlanLockedException(ConflictException):
    """Raised when a plan rebuild would discard already-paid installments."""

    def __init__(self, order_id: str, reason: str):
        super().__init__(
            message=f"Plan for order {order_id} cannot be rebuilt: {reason}",
            code="PLAN_LOCKED",
            details={"order_id": order_id},
        )
