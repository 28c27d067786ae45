"""Plan service - builds installment plans and handles checkout."""

from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

import structlog

from src.domain.entities import (
    Actor,
    EventType,
    Installment,
    InstallmentEvent,
    Order,
    OrderStatus,
    PaymentType,
)
from src.domain.exceptions import (
    OrderNotAdjustableException,
    OrderNotFoundException,
    PlanLockedException,
    ValidationException,
)
from src.domain.interfaces import AccessGate, EventPublisher, UnitOfWork
from src.application.dto import BuildPlanRequest, CheckoutRequest, PlanResponse
from src.service.installments import (
    InstallmentSettings,
    custom_plan_amounts,
    due_dates,
    installment_settings,
    plan_amounts,
    validate_installment_count,
)

from .support import lock_order, require_order_access, require_privileged

logger = structlog.get_logger(__name__)


class PlanService:
    """
    Application service for installment plan use cases.

    Every plan is rebuilt from scratch: existing installments are deleted
    and a fresh set is created inside the same transaction.
    """

    def __init__(
        self,
        unit_of_work: UnitOfWork,
        access_gate: AccessGate,
        event_publisher: EventPublisher,
        settings: InstallmentSettings = installment_settings,
    ):
        self._uow = unit_of_work
        self._gate = access_gate
        self._events = event_publisher
        self._settings = settings

    async def build_plan(
        self,
        request: BuildPlanRequest,
        actor: Optional[Actor] = None,
    ) -> PlanResponse:
        """
        Build (or rebuild) the installment plan of an order.

        ONE_TIME removes any installments and leaves the order pending a
        single payment. INSTALLMENT splits the total floor-wise with the
        remainder on the last installment, optionally pinning the first
        payment.

        Args:
            request: Order, payment type, count and optional first payment
            actor: Caller, when invoked on behalf of a user; must then be
                privileged and in scope of the order. Internal callers
                (order creation) pass None.

        Returns:
            PlanResponse with the new installments

        Raises:
            PermissionDeniedException: Actor lacks the privilege or scope
            ValidationException: Invalid count or amounts
            OrderNotFoundException: Order does not exist
            PlanLockedException / OrderNotAdjustableException: Plan cannot
                be rebuilt any more
        """
        if actor is not None:
            require_privileged(self._gate, actor)

        errors = request.validate()
        if errors:
            raise ValidationException("; ".join(errors))

        log = logger.bind(
            order_id=str(request.order_id),
            payment_type=request.payment_type.value,
        )

        async with self._uow as uow:
            order = await lock_order(uow, request.order_id)
            if actor is not None:
                require_order_access(self._gate, actor, order)

            existing = await uow.installments.list_by_order(order.id)
            self._ensure_rebuildable(order, existing)

            installments: List[Installment] = []

            if request.payment_type == PaymentType.ONE_TIME:
                order.is_installment = False
            else:
                count = validate_installment_count(request.installment_count, self._settings)
                amounts = plan_amounts(
                    order.total_amount,
                    count,
                    request.first_payment_amount,
                )
                installments = self._new_installments(
                    order.id,
                    [(amount, False) for amount in amounts],
                    request.start_date,
                )
                order.is_installment = True

            await uow.installments.replace_for_order(order.id, installments)

            order.payment_type = request.payment_type
            order.status = OrderStatus.PENDING_PAYMENT
            order.paid_at = None
            await uow.orders.update(order)

        log.info(
            "plan_created",
            num_installments=len(installments),
            replaced=len(existing),
            total_amount=order.total_amount,
        )

        await self._events.publish(
            InstallmentEvent(
                event_type=EventType.PLAN_CREATED,
                order_id=order.id,
                actor_id=actor.id if actor else None,
                payload={
                    "payment_type": order.payment_type.value,
                    "total_amount": order.total_amount,
                    "amounts": [i.amount for i in installments],
                },
            )
        )

        return PlanResponse.from_entities(order, installments)

    async def complete_order_payment(
        self,
        actor: Actor,
        request: CheckoutRequest,
    ) -> PlanResponse:
        """
        Checkout entry point: settle an order at once or open its plan.

        ONE_TIME marks the order PAID and credits the member's lifetime
        spend with the full total. INSTALLMENT creates the plan, pinning
        the amounts given in `custom_plan`, and activates it.

        Raises:
            PermissionDeniedException: Actor may not check out this order
            ValidationException: Invalid count or custom plan
            OrderNotFoundException: Order does not exist
            PlanLockedException / OrderNotAdjustableException: Order is
                already settled or has paid installments
        """
        require_privileged(self._gate, actor)

        errors = request.validate()
        if errors:
            raise ValidationException("; ".join(errors))

        log = logger.bind(
            order_id=str(request.order_id),
            payment_type=request.payment_type.value,
            actor_id=actor.id,
        )

        async with self._uow as uow:
            order = await lock_order(uow, request.order_id)
            require_order_access(self._gate, actor, order)

            existing = await uow.installments.list_by_order(order.id)
            self._ensure_rebuildable(order, existing)

            installments: List[Installment] = []

            if request.payment_type == PaymentType.ONE_TIME:
                order.is_installment = False
                order.status = OrderStatus.PAID
                order.paid_at = datetime.utcnow()
                await uow.members.add_to_total_spent(order.member_id, order.total_amount)
            else:
                count = validate_installment_count(request.installment_count, self._settings)
                amounts = custom_plan_amounts(order.total_amount, count, request.custom_plan)
                installments = self._new_installments(order.id, amounts, request.start_date)
                order.is_installment = True
                order.status = OrderStatus.INSTALLMENT_ACTIVE
                order.paid_at = None

            await uow.installments.replace_for_order(order.id, installments)

            order.payment_type = request.payment_type
            await uow.orders.update(order)

        log.info(
            "order_checked_out",
            status=order.status.value,
            num_installments=len(installments),
            custom_installments=sorted(request.custom_plan),
        )

        await self._events.publish(
            InstallmentEvent(
                event_type=EventType.ORDER_CHECKED_OUT,
                order_id=order.id,
                actor_id=actor.id,
                payload={
                    "payment_type": order.payment_type.value,
                    "status": order.status.value,
                    "total_amount": order.total_amount,
                    "amounts": [i.amount for i in installments],
                    "custom_installments": sorted(request.custom_plan),
                },
            )
        )

        return PlanResponse.from_entities(order, installments)

    async def get_plan(self, actor: Actor, order_id: UUID) -> PlanResponse:
        """
        Retrieve an order's payment state and installments.

        Raises:
            OrderNotFoundException: Order does not exist
            PermissionDeniedException: Order is outside the actor's scope
        """
        async with self._uow as uow:
            order = await uow.orders.get_by_id(order_id)
            if order is None:
                logger.warning("order_not_found", order_id=str(order_id))
                raise OrderNotFoundException(str(order_id))

            require_order_access(self._gate, actor, order)
            installments = await uow.installments.list_by_order(order.id)

        logger.info(
            "plan_retrieved",
            order_id=str(order_id),
            num_installments=len(installments),
        )

        return PlanResponse.from_entities(order, installments)

    def _ensure_rebuildable(self, order: Order, existing: List[Installment]) -> None:
        """Refuse to discard a plan that has money on it or a settled order."""
        if order.status.is_terminal:
            raise OrderNotAdjustableException(
                str(order.id),
                order.status.value,
                operation="rebuild its plan",
            )

        paid = [i.installment_no for i in existing if i.is_paid]
        if paid:
            raise PlanLockedException(
                str(order.id),
                f"installments {paid} are already paid",
            )

    def _new_installments(
        self,
        order_id: UUID,
        amounts: List[tuple],
        start_date: date | None,
    ) -> List[Installment]:
        """Create installments 1..N from (amount, is_custom) pairs."""
        schedule = due_dates(len(amounts), start_date=start_date, settings=self._settings)

        return [
            Installment(
                order_id=order_id,
                installment_no=no,
                due_date=due_date,
                amount=amount,
                is_custom=is_custom,
            )
            for no, ((amount, is_custom), due_date) in enumerate(zip(amounts, schedule), start=1)
        ]
