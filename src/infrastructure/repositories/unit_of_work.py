"""SQLAlchemy unit of work: one session and one transaction per block."""

import structlog
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.domain.interfaces import UnitOfWork

from .installment_repository import PostgresInstallmentRepository
from .member_repository import PostgresMemberRepository
from .order_repository import PostgresOrderRepository

logger = structlog.get_logger(__name__)


class SqlAlchemyUnitOfWork(UnitOfWork):
    """
    Opens a fresh session on every `async with` and binds the repositories
    to it. The session is closed when the block exits.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory
        self._session: AsyncSession | None = None

    async def __aenter__(self) -> "SqlAlchemyUnitOfWork":
        self._session = self._session_factory()
        self.orders = PostgresOrderRepository(self._session)
        self.installments = PostgresInstallmentRepository(self._session)
        self.members = PostgresMemberRepository(self._session)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        try:
            await super().__aexit__(exc_type, exc, tb)
        finally:
            await self._session.close()
            self._session = None

    async def commit(self) -> None:
        await self._session.commit()

    async def rollback(self) -> None:
        await self._session.rollback()

    async def ping(self) -> bool:
        try:
            async with self._session_factory() as session:
                await session.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as exc:
            logger.warning("database_ping_failed", error=str(exc))
            return False
        return True
