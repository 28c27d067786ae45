"""
Fixtures for integration tests.

Provides:
- Test client for FastAPI app
- In-memory SQLite database shared by every unit of work
- Recording event publisher
- Seeded members and orders, and actor header sets
"""

from typing import AsyncGenerator, List
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from src.main import app
from src.core.dependencies import get_event_publisher, get_unit_of_work
from src.domain.entities import InstallmentEvent
from src.domain.interfaces import EventPublisher
from src.infrastructure.database import Base, MemberModel, OrderModel
from src.infrastructure.repositories import SqlAlchemyUnitOfWork


NORTH = "branch-north"
SOUTH = "branch-south"


# =============================================================================
# Mock Clients
# =============================================================================

class RecordingEventPublisher(EventPublisher):
    """Event publisher that keeps events in memory."""

    def __init__(self, fail_mode: bool = False):
        self.fail_mode = fail_mode
        self.events: List[InstallmentEvent] = []

    async def publish(self, event: InstallmentEvent) -> bool:
        if self.fail_mode:
            return False
        self.events.append(event)
        return True

    @property
    def types(self) -> List[str]:
        return [e.event_type.value for e in self.events]


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def test_engine():
    """Create an in-memory SQLite async engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def seed_order(session_factory):
    """Factory: insert a member (if new) and an order; returns the order id."""

    async def _seed(
        total: int = 1000,
        member_id: str = "member-1",
        branch_id: str = NORTH,
    ) -> str:
        order_id = str(uuid4())
        async with session_factory() as session:
            if await session.get(MemberModel, member_id) is None:
                session.add(MemberModel(id=member_id, name="Ana", branch_id=branch_id, total_spent=0))
            session.add(
                OrderModel(
                    id=order_id,
                    member_id=member_id,
                    branch_id=branch_id,
                    total_amount=total,
                )
            )
            await session.commit()
        return order_id

    return _seed


@pytest_asyncio.fixture
async def member_total_spent(session_factory):
    """Read a member's lifetime spend straight from the database."""

    async def _read(member_id: str = "member-1") -> int:
        async with session_factory() as session:
            member = await session.get(MemberModel, member_id)
            return member.total_spent

    return _read


# =============================================================================
# Mock Client Fixtures
# =============================================================================

@pytest.fixture
def event_publisher() -> RecordingEventPublisher:
    return RecordingEventPublisher()


# =============================================================================
# App Client Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
    event_publisher: RecordingEventPublisher,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client with the database and event sink replaced.

    Every request gets its own unit of work on the shared in-memory
    database, as in production.
    """
    def override_get_unit_of_work():
        return SqlAlchemyUnitOfWork(session_factory)

    def override_get_event_publisher():
        return event_publisher

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_event_publisher] = override_get_event_publisher

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# =============================================================================
# Actor Header Fixtures
# =============================================================================

@pytest.fixture
def boss_headers() -> dict:
    return {"X-Actor-Id": "boss-1", "X-Actor-Role": "BOSS"}


@pytest.fixture
def manager_headers() -> dict:
    return {"X-Actor-Id": "manager-1", "X-Actor-Role": "BRANCH_MANAGER", "X-Branch-Id": NORTH}


@pytest.fixture
def other_manager_headers() -> dict:
    return {"X-Actor-Id": "manager-2", "X-Actor-Role": "BRANCH_MANAGER", "X-Branch-Id": SOUTH}


@pytest.fixture
def artist_headers() -> dict:
    return {"X-Actor-Id": "artist-1", "X-Actor-Role": "ARTIST", "X-Branch-Id": NORTH}


@pytest.fixture
def member_headers() -> dict:
    return {"X-Actor-Id": "member-1", "X-Actor-Role": "MEMBER"}


# =============================================================================
# Helper Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def active_plan(client: AsyncClient, seed_order, boss_headers):
    """An order of 1000 checked out as three installments; returns the plan body."""
    order_id = await seed_order(1000)
    response = await client.post(
        f"/v1/orders/{order_id}/checkout",
        json={"payment_type": "INSTALLMENT", "installment_count": 3},
        headers=boss_headers,
    )
    assert response.status_code == 200
    return response.json()
