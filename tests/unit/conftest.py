"""
Fixtures for unit tests.

Provides in-memory stand-ins for the persistence and event collaborators.

The unit of work snapshots the whole store on entry and restores it on
rollback, so tests can assert that a rejected operation left nothing
behind. Repositories hand out copies, like a database would.
"""

from copy import deepcopy
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Dict, List, Optional
from uuid import UUID

import pytest

from src.application.services import (
    AdjustmentService,
    InstallmentService,
    OverdueService,
    PlanService,
)
from src.domain.entities import (
    Actor,
    Role,
    Installment,
    InstallmentEvent,
    InstallmentStatus,
    Member,
    Order,
    OverdueInstallmentView,
)
from src.infrastructure.clients import RoleBasedAccessGate
from src.domain.interfaces import (
    EventPublisher,
    InstallmentRepository,
    MemberRepository,
    OrderRepository,
    UnitOfWork,
)


@dataclass
class InMemoryStore:
    orders: Dict[UUID, Order] = field(default_factory=dict)
    installments: Dict[UUID, Installment] = field(default_factory=dict)
    members: Dict[str, Member] = field(default_factory=dict)

    def installments_of(self, order_id: UUID) -> List[Installment]:
        return sorted(
            (i for i in self.installments.values() if i.order_id == order_id),
            key=lambda i: i.installment_no,
        )


class InMemoryOrderRepository(OrderRepository):
    def __init__(self, store: InMemoryStore):
        self._store = store

    async def add(self, order: Order) -> Order:
        self._store.orders[order.id] = replace(order)
        return order

    async def get_by_id(self, order_id: UUID, for_update: bool = False) -> Optional[Order]:
        order = self._store.orders.get(order_id)
        return replace(order) if order else None

    async def update(self, order: Order) -> Order:
        self._store.orders[order.id] = replace(order)
        return order


class InMemoryInstallmentRepository(InstallmentRepository):
    def __init__(self, store: InMemoryStore):
        self._store = store

    async def get_by_id(self, installment_id: UUID) -> Optional[Installment]:
        inst = self._store.installments.get(installment_id)
        return replace(inst) if inst else None

    async def list_by_order(self, order_id: UUID) -> List[Installment]:
        return [replace(i) for i in self._store.installments_of(order_id)]

    async def replace_for_order(
        self,
        order_id: UUID,
        installments: List[Installment],
    ) -> List[Installment]:
        for inst in self._store.installments_of(order_id):
            del self._store.installments[inst.id]
        for inst in installments:
            self._store.installments[inst.id] = replace(inst)
        return installments

    async def update_many(self, installments: List[Installment]) -> None:
        for inst in installments:
            assert inst.id in self._store.installments
            self._store.installments[inst.id] = replace(inst)

    async def delete(self, installment_id: UUID) -> None:
        self._store.installments.pop(installment_id, None)

    async def mark_overdue(self, today: date) -> int:
        marked = 0
        for inst in self._store.installments.values():
            if inst.status == InstallmentStatus.UNPAID and inst.due_date < today:
                inst.status = InstallmentStatus.OVERDUE
                marked += 1
        return marked

    async def list_overdue(self, branch_id: Optional[str] = None) -> List[OverdueInstallmentView]:
        views = []
        for inst in self._store.installments.values():
            if inst.status != InstallmentStatus.OVERDUE:
                continue
            order = self._store.orders[inst.order_id]
            if branch_id is not None and order.branch_id != branch_id:
                continue
            member = self._store.members.get(order.member_id)
            views.append(
                OverdueInstallmentView(
                    installment=replace(inst),
                    order_total_amount=order.total_amount,
                    order_status=order.status.value,
                    member_id=order.member_id,
                    member_name=member.name if member else None,
                    branch_id=order.branch_id,
                )
            )
        return sorted(views, key=lambda v: (v.installment.due_date, v.installment.installment_no))


class InMemoryMemberRepository(MemberRepository):
    def __init__(self, store: InMemoryStore):
        self._store = store

    async def get_by_id(self, member_id: str) -> Optional[Member]:
        member = self._store.members.get(member_id)
        return replace(member) if member else None

    async def add_to_total_spent(self, member_id: str, amount: int) -> None:
        self._store.members[member_id].total_spent += amount


class InMemoryUnitOfWork(UnitOfWork):
    def __init__(self, store: Optional[InMemoryStore] = None):
        self.store = store or InMemoryStore()
        self.orders = InMemoryOrderRepository(self.store)
        self.installments = InMemoryInstallmentRepository(self.store)
        self.members = InMemoryMemberRepository(self.store)
        self.commits = 0
        self.rollbacks = 0
        self._snapshot: Optional[InMemoryStore] = None

    async def __aenter__(self) -> "InMemoryUnitOfWork":
        self._snapshot = deepcopy(self.store)
        return self

    async def commit(self) -> None:
        self.commits += 1
        self._snapshot = None

    async def rollback(self) -> None:
        self.rollbacks += 1
        if self._snapshot is not None:
            self.store.orders = self._snapshot.orders
            self.store.installments = self._snapshot.installments
            self.store.members = self._snapshot.members
            self._snapshot = None


class RecordingEventPublisher(EventPublisher):
    def __init__(self, fail: bool = False):
        self.events: List[InstallmentEvent] = []
        self.fail = fail

    async def publish(self, event: InstallmentEvent) -> bool:
        if self.fail:
            return False
        self.events.append(event)
        return True

    @property
    def types(self) -> List[str]:
        return [e.event_type.value for e in self.events]


# =============================================================================
# Fixtures
# =============================================================================

BRANCH = "branch-north"
OTHER_BRANCH = "branch-south"


@pytest.fixture
def uow() -> InMemoryUnitOfWork:
    return InMemoryUnitOfWork()


@pytest.fixture
def store(uow: InMemoryUnitOfWork) -> InMemoryStore:
    return uow.store


@pytest.fixture
def events() -> RecordingEventPublisher:
    return RecordingEventPublisher()


@pytest.fixture
def failing_events() -> RecordingEventPublisher:
    return RecordingEventPublisher(fail=True)


@pytest.fixture
def gate() -> RoleBasedAccessGate:
    return RoleBasedAccessGate(
        privileged_roles=["BOSS", "BRANCH_MANAGER"],
        top_level_role="BOSS",
    )


@pytest.fixture
def boss() -> Actor:
    return Actor(id="boss-1", role=Role.BOSS)


@pytest.fixture
def manager() -> Actor:
    return Actor(id="manager-1", role=Role.BRANCH_MANAGER, branch_id=BRANCH)


@pytest.fixture
def other_manager() -> Actor:
    return Actor(id="manager-2", role=Role.BRANCH_MANAGER, branch_id=OTHER_BRANCH)


@pytest.fixture
def artist() -> Actor:
    return Actor(id="artist-1", role=Role.ARTIST, branch_id=BRANCH)


@pytest.fixture
def seed_order(store: InMemoryStore):
    """Factory: put a member and an order of `total` into the store."""

    def _seed(total: int = 1000, member_id: str = "member-1", branch_id: str = BRANCH) -> Order:
        store.members.setdefault(member_id, Member(id=member_id, name="Ana", branch_id=branch_id))
        order = Order(member_id=member_id, branch_id=branch_id, total_amount=total)
        store.orders[order.id] = order
        return replace(order)

    return _seed


@pytest.fixture
def plan_service(uow, gate, events) -> PlanService:
    return PlanService(unit_of_work=uow, access_gate=gate, event_publisher=events)


@pytest.fixture
def adjustment_service(uow, gate, events) -> AdjustmentService:
    return AdjustmentService(unit_of_work=uow, access_gate=gate, event_publisher=events)


@pytest.fixture
def installment_service(uow, gate, events) -> InstallmentService:
    return InstallmentService(unit_of_work=uow, access_gate=gate, event_publisher=events)


@pytest.fixture
def overdue_service(uow, gate, events) -> OverdueService:
    return OverdueService(unit_of_work=uow, access_gate=gate, event_publisher=events)
