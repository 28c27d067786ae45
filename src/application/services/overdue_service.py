"""Overdue service - batch sweep of late installments and its report."""

from datetime import datetime
from typing import List

import structlog

from src.domain.entities import Actor, EventType, InstallmentEvent
from src.domain.interfaces import AccessGate, EventPublisher, UnitOfWork
from src.application.dto import MarkOverdueResponse, OverdueInstallmentDTO

from .support import require_privileged

logger = structlog.get_logger(__name__)


class OverdueService:
    """
    Application service for overdue installments.

    The sweep is a single set-based update. UNPAID -> OVERDUE is
    monotonic, so repeated or concurrent sweeps converge on the same
    result and need no per-row locking.
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

    async def mark_overdue(
        self,
        actor: Actor,
        now: datetime | None = None,
    ) -> MarkOverdueResponse:
        """
        Move every UNPAID installment whose due date has passed to OVERDUE.

        Args:
            actor: Caller; must be privileged
            now: Reference time (defaults to the current UTC time)

        Returns:
            MarkOverdueResponse with the number of rows changed; 0 when
            nothing new became overdue
        """
        require_privileged(self._gate, actor)

        today = (now or datetime.utcnow()).date()

        async with self._uow as uow:
            marked = await uow.installments.mark_overdue(today)

        logger.info(
            "installments_marked_overdue",
            marked_count=marked,
            as_of=today.isoformat(),
            actor_id=actor.id,
        )

        await self._events.publish(
            InstallmentEvent(
                event_type=EventType.INSTALLMENTS_MARKED_OVERDUE,
                actor_id=actor.id,
                payload={"marked_count": marked, "as_of": today.isoformat()},
            )
        )

        return MarkOverdueResponse(marked_count=marked, as_of=today.isoformat())

    async def list_overdue(self, actor: Actor) -> List[OverdueInstallmentDTO]:
        """
        List OVERDUE installments with their order and member context.

        The top-level role sees every branch; other privileged actors see
        their own branch only.
        """
        require_privileged(self._gate, actor)

        top_level = self._gate.is_top_level(actor)
        if not top_level and actor.branch_id is None:
            logger.warning("overdue_list_without_branch", actor_id=actor.id)
            return []

        branch_id = None if top_level else actor.branch_id

        async with self._uow as uow:
            views = await uow.installments.list_overdue(branch_id=branch_id)

        logger.info(
            "overdue_installments_listed",
            count=len(views),
            branch_id=branch_id,
        )

        return [OverdueInstallmentDTO.from_view(view) for view in views]
