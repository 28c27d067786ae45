"""External collaborator interfaces."""

from abc import ABC, abstractmethod

from src.domain.entities import Actor, InstallmentEvent, Order


class AccessGate(ABC):
    """
    Access decisions for the calling actor.

    Consulted once at the top of each operation, before any write.
    """

    @abstractmethod
    def is_privileged(self, actor: Actor) -> bool:
        """
        Whether the actor holds the elevated role capability.

        Gates adjustments, overdue sweeps, and direct installment
        edit/delete.
        """
        ...

    @abstractmethod
    def can_read_order(self, actor: Actor, order: Order) -> bool:
        """
        Whether the actor may read and pay the given order.

        Scoped by branch or ownership unless the actor holds the
        top-level role.
        """
        ...

    @abstractmethod
    def is_top_level(self, actor: Actor) -> bool:
        """Whether the actor sees every branch."""
        ...


class EventPublisher(ABC):
    """
    Sink for structured installment events.

    Consumed by an external observability collaborator.
    """

    @abstractmethod
    async def publish(self, event: InstallmentEvent) -> bool:
        """
        Publish one event.

        Returns:
            True if the event was delivered

        Note:
            Delivery failures must not raise; the operation that produced
            the event has already committed.
        """
        ...
