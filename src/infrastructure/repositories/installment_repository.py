"""PostgreSQL repository implementation for installments."""

from datetime import date
from typing import List, Optional
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities import Installment, InstallmentStatus, OverdueInstallmentView
from src.domain.interfaces import InstallmentRepository
from src.infrastructure.database.models import InstallmentModel, MemberModel, OrderModel


class PostgresInstallmentRepository(InstallmentRepository):
    """
    PostgreSQL-backed installment repository.

    Writes are issued as explicit statements in the order given, so a
    renumbering that walks installments upward never collides with the
    (order_id, installment_no) unique constraint.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_by_id(self, installment_id: UUID) -> Optional[Installment]:
        stmt = select(InstallmentModel).where(InstallmentModel.id == str(installment_id))
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._to_entity(model)

    async def list_by_order(self, order_id: UUID) -> List[Installment]:
        stmt = (
            select(InstallmentModel)
            .where(InstallmentModel.order_id == str(order_id))
            .order_by(InstallmentModel.installment_no)
        )
        result = await self._session.execute(stmt)

        return [self._to_entity(model) for model in result.scalars().all()]

    async def replace_for_order(
        self,
        order_id: UUID,
        installments: List[Installment],
    ) -> List[Installment]:
        await self._session.execute(
            delete(InstallmentModel)
            .where(InstallmentModel.order_id == str(order_id))
            .execution_options(synchronize_session=False)
        )

        self._session.add_all([self._to_model(inst) for inst in installments])
        await self._session.flush()

        return installments

    async def update_many(self, installments: List[Installment]) -> None:
        for inst in installments:
            stmt = (
                update(InstallmentModel)
                .where(InstallmentModel.id == str(inst.id))
                .values(
                    installment_no=inst.installment_no,
                    due_date=inst.due_date,
                    amount=inst.amount,
                    status=inst.status.value,
                    paid_at=inst.paid_at,
                    payment_method=inst.payment_method,
                    notes=inst.notes,
                    is_custom=inst.is_custom,
                    auto_adjusted=inst.auto_adjusted,
                )
                .execution_options(synchronize_session=False)
            )
            await self._session.execute(stmt)

    async def delete(self, installment_id: UUID) -> None:
        await self._session.execute(
            delete(InstallmentModel)
            .where(InstallmentModel.id == str(installment_id))
            .execution_options(synchronize_session=False)
        )

    async def mark_overdue(self, today: date) -> int:
        stmt = (
            update(InstallmentModel)
            .where(
                InstallmentModel.status == InstallmentStatus.UNPAID.value,
                InstallmentModel.due_date < today,
            )
            .values(status=InstallmentStatus.OVERDUE.value)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)

        return result.rowcount or 0

    async def list_overdue(
        self,
        branch_id: Optional[str] = None,
    ) -> List[OverdueInstallmentView]:
        stmt = (
            select(InstallmentModel, OrderModel, MemberModel.name)
            .join(OrderModel, InstallmentModel.order_id == OrderModel.id)
            .outerjoin(MemberModel, MemberModel.id == OrderModel.member_id)
            .where(InstallmentModel.status == InstallmentStatus.OVERDUE.value)
            .order_by(InstallmentModel.due_date, InstallmentModel.installment_no)
        )
        if branch_id is not None:
            stmt = stmt.where(OrderModel.branch_id == branch_id)

        result = await self._session.execute(stmt)

        return [
            OverdueInstallmentView(
                installment=self._to_entity(inst),
                order_total_amount=order.total_amount,
                order_status=order.status,
                member_id=order.member_id,
                member_name=member_name,
                branch_id=order.branch_id,
            )
            for inst, order, member_name in result.all()
        ]

    def _to_model(self, inst: Installment) -> InstallmentModel:
        return InstallmentModel(
            id=str(inst.id),
            order_id=str(inst.order_id),
            installment_no=inst.installment_no,
            due_date=inst.due_date,
            amount=inst.amount,
            status=inst.status.value,
            paid_at=inst.paid_at,
            payment_method=inst.payment_method,
            notes=inst.notes,
            is_custom=inst.is_custom,
            auto_adjusted=inst.auto_adjusted,
            created_at=inst.created_at,
        )

    def _to_entity(self, model: InstallmentModel) -> Installment:
        return Installment(
            id=UUID(model.id),
            order_id=UUID(model.order_id),
            installment_no=model.installment_no,
            due_date=model.due_date,
            amount=model.amount,
            status=InstallmentStatus(model.status),
            paid_at=model.paid_at,
            payment_method=model.payment_method,
            notes=model.notes,
            is_custom=model.is_custom,
            auto_adjusted=model.auto_adjusted,
            created_at=model.created_at,
        )
