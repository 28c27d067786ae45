"""PostgreSQL repository implementation for orders."""

from typing import Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities import Order, OrderStatus, PaymentType
from src.domain.interfaces import OrderRepository
from src.infrastructure.database.models import OrderModel


class PostgresOrderRepository(OrderRepository):
    """PostgreSQL-backed order repository."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def add(self, order: Order) -> Order:
        model = OrderModel(
            id=str(order.id),
            member_id=order.member_id,
            branch_id=order.branch_id,
            total_amount=order.total_amount,
            status=order.status.value,
            payment_type=order.payment_type.value,
            is_installment=order.is_installment,
            paid_at=order.paid_at,
            created_at=order.created_at,
        )

        self._session.add(model)
        await self._session.flush()

        return order

    async def get_by_id(
        self,
        order_id: UUID,
        for_update: bool = False,
    ) -> Optional[Order]:
        stmt = select(OrderModel).where(OrderModel.id == str(order_id))
        if for_update:
            stmt = stmt.with_for_update()

        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._to_entity(model)

    async def update(self, order: Order) -> Order:
        stmt = (
            update(OrderModel)
            .where(OrderModel.id == str(order.id))
            .values(
                status=order.status.value,
                payment_type=order.payment_type.value,
                is_installment=order.is_installment,
                paid_at=order.paid_at,
            )
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(stmt)

        return order

    def _to_entity(self, model: OrderModel) -> Order:
        return Order(
            id=UUID(model.id),
            member_id=model.member_id,
            branch_id=model.branch_id,
            total_amount=model.total_amount,
            status=OrderStatus(model.status),
            payment_type=PaymentType(model.payment_type),
            is_installment=model.is_installment,
            paid_at=model.paid_at,
            created_at=model.created_at,
        )
