"""PostgreSQL repository implementation for members."""

from typing import Optional

import structlog
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities import Member
from src.domain.interfaces import MemberRepository
from src.infrastructure.database.models import MemberModel

logger = structlog.get_logger(__name__)


class PostgresMemberRepository(MemberRepository):
    """PostgreSQL-backed member repository."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_by_id(self, member_id: str) -> Optional[Member]:
        stmt = select(MemberModel).where(MemberModel.id == member_id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return Member(
            id=model.id,
            name=model.name,
            branch_id=model.branch_id,
            total_spent=model.total_spent,
        )

    async def add_to_total_spent(self, member_id: str, amount: int) -> None:
        # single statement so concurrent payments for one member both count
        stmt = (
            update(MemberModel)
            .where(MemberModel.id == member_id)
            .values(total_spent=MemberModel.total_spent + amount)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)

        if not result.rowcount:
            logger.warning("member_not_found_for_spend", member_id=member_id, amount=amount)
