"""Adjustment service - retroactive change of one installment's amount."""

import structlog

from src.domain.entities import (
    ADJUSTABLE_ORDER_STATUSES,
    Actor,
    EventType,
    InstallmentEvent,
)
from src.domain.exceptions import OrderNotAdjustableException, ValidationException
from src.domain.interfaces import AccessGate, EventPublisher, UnitOfWork
from src.application.dto import AdjustmentRequest, AdjustmentResponse
from src.service.installments import plan_adjustment

from .support import (
    lock_order,
    require_order_access,
    require_privileged,
    sync_order_status,
)

logger = structlog.get_logger(__name__)


class AdjustmentService:
    """
    Application service for installment amount adjustments.

    The order row is locked for the whole computation, so two adjustments
    (or an adjustment and a payment) on the same order cannot interleave.
    """

    def __init__(
        self,
        unit_of_work: UnitOfWork,
        access_gate: AccessGate,
        event_publisher: EventPublisher,
    ):
        self._uow = unit_of_work
        self._gate = access_gate
        self._events = event_publisher

    async def adjust_installment(
        self,
        actor: Actor,
        request: AdjustmentRequest,
    ) -> AdjustmentResponse:
        """
        Set one installment to a new amount and rebalance the rest.

        Args:
            actor: Caller; must be privileged and in scope of the order
            request: Order, installment number and new amount

        Returns:
            AdjustmentResponse with every installment and the breakdown

        Raises:
            PermissionDeniedException: Actor lacks the privilege or scope
            ValidationException: new_amount is not a positive integer
            OrderNotFoundException / InstallmentNotFoundException
            OrderNotAdjustableException: Plan is not active
            ConflictException subclasses: Target paid, budget exceeded or
                residual mismatch; details carry the correcting value
            InvariantViolationException: Sum could not be reconciled;
                nothing was written
        """
        require_privileged(self._gate, actor)

        errors = request.validate()
        if errors:
            raise ValidationException("; ".join(errors))

        log = logger.bind(
            order_id=str(request.order_id),
            installment_no=request.installment_no,
            new_amount=request.new_amount,
            actor_id=actor.id,
        )

        async with self._uow as uow:
            order = await lock_order(uow, request.order_id)
            require_order_access(self._gate, actor, order)

            if order.status not in ADJUSTABLE_ORDER_STATUSES:
                raise OrderNotAdjustableException(str(order.id), order.status.value)

            installments = await uow.installments.list_by_order(order.id)

            # raises before any write; the outcome is a complete verified state
            outcome = plan_adjustment(
                order.total_amount,
                installments,
                request.installment_no,
                request.new_amount,
            )

            await uow.installments.update_many(
                [i for i in outcome.installments if not i.is_paid]
            )

            if sync_order_status(order, outcome.installments):
                await uow.orders.update(order)

        breakdown = outcome.breakdown
        if breakdown.rounding_correction:
            log.warning(
                "rounding_drift_corrected",
                delta=breakdown.rounding_correction,
            )

        log.info("installment_adjusted", **breakdown.to_dict())

        await self._events.publish(
            InstallmentEvent(
                event_type=EventType.INSTALLMENT_ADJUSTED,
                order_id=order.id,
                actor_id=actor.id,
                payload={
                    "installment_no": request.installment_no,
                    "new_amount": request.new_amount,
                    "amounts": [i.amount for i in outcome.installments],
                    **breakdown.to_dict(),
                },
            )
        )

        return AdjustmentResponse.from_outcome(order, outcome)
