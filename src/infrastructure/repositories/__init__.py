"""Repository implementations."""

from .installment_repository import PostgresInstallmentRepository
from .member_repository import PostgresMemberRepository
from .order_repository import PostgresOrderRepository
from .unit_of_work import SqlAlchemyUnitOfWork

__all__ = [
    "PostgresInstallmentRepository",
    "PostgresMemberRepository",
    "PostgresOrderRepository",
    "SqlAlchemyUnitOfWork",
]
