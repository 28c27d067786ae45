"""Repository and unit-of-work interfaces for data persistence."""

from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional
from uuid import UUID

from src.domain.entities import (
    Installment,
    Member,
    Order,
    OverdueInstallmentView,
)


class OrderRepository(ABC):
    """
    Abstract repository for Order persistence.

    Implementations may use PostgreSQL, in-memory storage, etc.
    """

    @abstractmethod
    async def add(self, order: Order) -> Order:
        """Persist a new order."""
        ...

    @abstractmethod
    async def get_by_id(
        self,
        order_id: UUID,
        for_update: bool = False,
    ) -> Optional[Order]:
        """
        Retrieve an order by ID.

        Args:
            order_id: The order's unique identifier
            for_update: Lock the order row until the unit of work ends.
                This is the per-order serialization point for every
                mutating operation.

        Returns:
            The order if found, None otherwise
        """
        ...

    @abstractmethod
    async def update(self, order: Order) -> Order:
        """Write back the mutable payment fields of an existing order."""
        ...


class InstallmentRepository(ABC):
    """Abstract repository for Installment persistence."""

    @abstractmethod
    async def get_by_id(self, installment_id: UUID) -> Optional[Installment]:
        ...

    @abstractmethod
    async def list_by_order(self, order_id: UUID) -> List[Installment]:
        """
        Retrieve all installments of an order.

        Returns:
            Installments ordered by installment_no ascending
        """
        ...

    @abstractmethod
    async def replace_for_order(
        self,
        order_id: UUID,
        installments: List[Installment],
    ) -> List[Installment]:
        """Delete every installment of the order and insert the given set."""
        ...

    @abstractmethod
    async def update_many(self, installments: List[Installment]) -> None:
        """Write back the given installments, matched by ID."""
        ...

    @abstractmethod
    async def delete(self, installment_id: UUID) -> None:
        ...

    @abstractmethod
    async def mark_overdue(self, today: date) -> int:
        """
        Move every UNPAID installment due before `today` to OVERDUE.

        Returns:
            Number of rows changed
        """
        ...

    @abstractmethod
    async def list_overdue(
        self,
        branch_id: Optional[str] = None,
    ) -> List[OverdueInstallmentView]:
        """
        Retrieve OVERDUE installments joined with order and member context.

        Args:
            branch_id: Restrict to orders of one branch; None means all

        Returns:
            Views ordered by due_date ascending
        """
        ...


class MemberRepository(ABC):
    """Abstract repository for the member lifetime-spend aggregate."""

    @abstractmethod
    async def get_by_id(self, member_id: str) -> Optional[Member]:
        ...

    @abstractmethod
    async def add_to_total_spent(self, member_id: str, amount: int) -> None:
        """Increment the member's lifetime spend by `amount`."""
        ...


class UnitOfWork(ABC):
    """
    One atomic, all-or-nothing transaction.

    Usage:
        async with uow:
            order = await uow.orders.get_by_id(order_id, for_update=True)
            ...

    Leaving the block normally commits; leaving it with an exception
    rolls back every write made through the repositories.
    """

    orders: OrderRepository
    installments: InstallmentRepository
    members: MemberRepository

    async def __aenter__(self) -> "UnitOfWork":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            await self.commit()
        else:
            await self.rollback()

    @abstractmethod
    async def commit(self) -> None:
        ...

    @abstractmethod
    async def rollback(self) -> None:
        ...

    async def ping(self) -> bool:
        """Whether the backing store answers; used by the health check."""
        return True
