"""Installment service - payments and direct edits of single installments."""

from datetime import date, datetime
from typing import List
from uuid import UUID

import structlog

from src.domain.entities import (
    Actor,
    EventType,
    Installment,
    InstallmentEvent,
    InstallmentStatus,
    Order,
    OrderStatus,
)
from src.domain.exceptions import (
    ConflictException,
    InstallmentAlreadyPaidException,
    InstallmentNotFoundException,
    InstallmentStateException,
    OrderNotAdjustableException,
    ValidationException,
)
from src.domain.interfaces import AccessGate, EventPublisher, UnitOfWork
from src.application.dto import (
    InstallmentDTO,
    RecordPaymentRequest,
    UpdateInstallmentRequest,
)
from src.service.installments import reconcile_total

from .support import (
    lock_order,
    require_order_access,
    require_privileged,
    sync_order_status,
)

logger = structlog.get_logger(__name__)


class InstallmentService:
    """
    Application service for single-installment use cases.

    Each call locks the owning order first and re-reads the installment
    under that lock, so it sees any concurrent adjustment that committed
    before it.
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

    async def record_payment(
        self,
        actor: Actor,
        request: RecordPaymentRequest,
    ) -> InstallmentDTO:
        """
        Mark one installment PAID and resync the order status.

        The member's lifetime spend grows by the installment amount. An
        installment can only move to PAID once, so a retried call is
        refused instead of counting the money twice.

        Raises:
            ValidationException: payment_method missing
            InstallmentNotFoundException / OrderNotFoundException
            PermissionDeniedException: Order outside the actor's scope
            InstallmentAlreadyPaidException: Installment was already paid
            InstallmentStateException: Installment is CANCELLED
            OrderNotAdjustableException: Order is CANCELLED
        """
        errors = request.validate()
        if errors:
            raise ValidationException("; ".join(errors))

        paid_at = request.paid_at or datetime.utcnow()

        async with self._uow as uow:
            order, installments, installment = await self._load(
                uow, request.installment_id
            )
            require_order_access(self._gate, actor, order)

            if installment.is_paid:
                raise InstallmentAlreadyPaidException(installment.installment_no)
            if installment.status == InstallmentStatus.CANCELLED:
                raise InstallmentStateException(
                    installment.installment_no,
                    installment.status.value,
                    "record a payment",
                )
            if order.status == OrderStatus.CANCELLED:
                raise OrderNotAdjustableException(
                    str(order.id),
                    order.status.value,
                    operation="record a payment",
                )

            installment.status = InstallmentStatus.PAID
            installment.paid_at = paid_at
            installment.payment_method = request.payment_method.strip()
            installment.notes = request.notes
            await uow.installments.update_many([installment])

            if sync_order_status(order, installments, paid_at=paid_at):
                await uow.orders.update(order)

            await uow.members.add_to_total_spent(order.member_id, installment.amount)

        logger.info(
            "installment_paid",
            order_id=str(order.id),
            installment_no=installment.installment_no,
            amount=installment.amount,
            payment_method=installment.payment_method,
            order_status=order.status.value,
            actor_id=actor.id,
        )

        await self._events.publish(
            InstallmentEvent(
                event_type=EventType.INSTALLMENT_PAID,
                order_id=order.id,
                actor_id=actor.id,
                payload={
                    "installment_id": str(installment.id),
                    "installment_no": installment.installment_no,
                    "amount": installment.amount,
                    "payment_method": installment.payment_method,
                    "order_status": order.status.value,
                    "member_id": order.member_id,
                },
            )
        )

        return InstallmentDTO.from_entity(installment)

    async def update_installment(
        self,
        actor: Actor,
        request: UpdateInstallmentRequest,
        today: date | None = None,
    ) -> InstallmentDTO:
        """
        Change the due date and/or notes of an installment.

        Moving an OVERDUE installment's due date to today or later puts it
        back to UNPAID.
        """
        require_privileged(self._gate, actor)

        errors = request.validate()
        if errors:
            raise ValidationException("; ".join(errors))

        today = today or date.today()

        async with self._uow as uow:
            order, _, installment = await self._load(uow, request.installment_id)
            require_order_access(self._gate, actor, order)

            if request.due_date is not None:
                installment.due_date = request.due_date
                if installment.status == InstallmentStatus.OVERDUE and request.due_date >= today:
                    installment.status = InstallmentStatus.UNPAID

            if request.notes is not None:
                installment.notes = request.notes

            await uow.installments.update_many([installment])

        logger.info(
            "installment_updated",
            order_id=str(order.id),
            installment_no=installment.installment_no,
            due_date=installment.due_date.isoformat(),
            status=installment.status.value,
        )

        await self._events.publish(
            InstallmentEvent(
                event_type=EventType.INSTALLMENT_UPDATED,
                order_id=order.id,
                actor_id=actor.id,
                payload={
                    "installment_id": str(installment.id),
                    "installment_no": installment.installment_no,
                    "due_date": installment.due_date.isoformat(),
                    "status": installment.status.value,
                },
            )
        )

        return InstallmentDTO.from_entity(installment)

    async def delete_installment(self, actor: Actor, installment_id: UUID) -> None:
        """
        Remove an unpaid installment without breaking the plan invariants.

        The removed amount goes to the last remaining unpaid installment
        (preferring one that is not locked) and later installments are
        renumbered so numbering stays 1..N.

        Raises:
            InstallmentAlreadyPaidException: Installment is PAID
            ConflictException: No other unpaid installment can take the amount
        """
        require_privileged(self._gate, actor)

        async with self._uow as uow:
            order, installments, target = await self._load(uow, installment_id)
            require_order_access(self._gate, actor, order)

            if target.is_paid:
                raise InstallmentAlreadyPaidException(target.installment_no)

            rest = [i for i in installments if i.id != target.id]
            absorber = self._pick_absorber(rest)
            if absorber is None:
                raise ConflictException(
                    f"Installment {target.installment_no} is the last outstanding one; "
                    "rebuild the plan instead",
                    code="LAST_OUTSTANDING_INSTALLMENT",
                    details={"installment_no": target.installment_no},
                )

            absorber.amount += target.amount
            absorber.auto_adjusted = True

            for no, inst in enumerate(rest, start=1):
                inst.installment_no = no

            if order.is_installment:
                reconcile_total(order.total_amount, rest)

            await uow.installments.delete(target.id)
            await uow.installments.update_many(rest)

            if sync_order_status(order, rest):
                await uow.orders.update(order)

        logger.info(
            "installment_deleted",
            order_id=str(order.id),
            installment_no=target.installment_no,
            amount=target.amount,
            absorbed_by=absorber.installment_no,
        )

        await self._events.publish(
            InstallmentEvent(
                event_type=EventType.INSTALLMENT_DELETED,
                order_id=order.id,
                actor_id=actor.id,
                payload={
                    "installment_id": str(target.id),
                    "installment_no": target.installment_no,
                    "amount": target.amount,
                    "absorbed_by": absorber.installment_no,
                    "remaining_count": len(rest),
                },
            )
        )

    async def _load(
        self,
        uow: UnitOfWork,
        installment_id: UUID,
    ) -> tuple[Order, List[Installment], Installment]:
        """Lock the owning order, then re-read the installment under the lock."""
        found = await uow.installments.get_by_id(installment_id)
        if found is None:
            raise InstallmentNotFoundException(str(installment_id))

        order = await lock_order(uow, found.order_id)
        installments = await uow.installments.list_by_order(order.id)

        installment = next((i for i in installments if i.id == installment_id), None)
        if installment is None:
            raise InstallmentNotFoundException(str(installment_id))

        return order, installments, installment

    @staticmethod
    def _pick_absorber(installments: List[Installment]) -> Installment | None:
        unpaid = [
            i for i in installments
            if not i.is_paid and i.status != InstallmentStatus.CANCELLED
        ]
        free = [i for i in unpaid if not i.is_custom]
        if free:
            return free[-1]
        return unpaid[-1] if unpaid else None
