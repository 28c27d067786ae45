"""Dependency injection for FastAPI."""

from typing import Annotated, Optional

from fastapi import Depends, Header

from src.application.services import (
    AdjustmentService,
    InstallmentService,
    OverdueService,
    PlanService,
)
from src.core.config import settings
from src.domain.entities import Actor, Role
from src.domain.exceptions import PermissionDeniedException
from src.domain.interfaces import AccessGate, EventPublisher, UnitOfWork
from src.infrastructure.clients import (
    HttpEventPublisher,
    LoggingEventPublisher,
    RoleBasedAccessGate,
)
from src.infrastructure.database import db_manager
from src.infrastructure.repositories import SqlAlchemyUnitOfWork


# Persistence dependencies
def get_unit_of_work() -> UnitOfWork:
    """Get a UnitOfWork bound to the application's session factory."""
    return SqlAlchemyUnitOfWork(db_manager.session_factory)


# Collaborator dependencies
def get_access_gate() -> AccessGate:
    """Get the role-based AccessGate."""
    return RoleBasedAccessGate()


def get_event_publisher() -> EventPublisher:
    """Deliver events over HTTP when a webhook is configured, else log them."""
    if settings.event_webhook_url:
        return HttpEventPublisher()
    return LoggingEventPublisher()


# Caller identity, set by the upstream authentication proxy
def get_current_actor(
    x_actor_id: Annotated[Optional[str], Header()] = None,
    x_actor_role: Annotated[Optional[str], Header()] = None,
    x_branch_id: Annotated[Optional[str], Header()] = None,
) -> Actor:
    """Build the calling Actor from the identity headers."""
    if not x_actor_id or not x_actor_role:
        raise PermissionDeniedException("X-Actor-Id and X-Actor-Role headers are required")

    try:
        role = Role(x_actor_role.strip().upper())
    except ValueError:
        raise PermissionDeniedException(f"Unknown role: {x_actor_role}")

    return Actor(id=x_actor_id, role=role, branch_id=x_branch_id or None)


UnitOfWorkDep = Annotated[UnitOfWork, Depends(get_unit_of_work)]
AccessGateDep = Annotated[AccessGate, Depends(get_access_gate)]
EventPublisherDep = Annotated[EventPublisher, Depends(get_event_publisher)]


# Service dependencies
def get_plan_service(
    uow: UnitOfWorkDep,
    gate: AccessGateDep,
    events: EventPublisherDep,
) -> PlanService:
    """Get a PlanService instance."""
    return PlanService(unit_of_work=uow, access_gate=gate, event_publisher=events)


def get_adjustment_service(
    uow: UnitOfWorkDep,
    gate: AccessGateDep,
    events: EventPublisherDep,
) -> AdjustmentService:
    """Get an AdjustmentService instance."""
    return AdjustmentService(unit_of_work=uow, access_gate=gate, event_publisher=events)


def get_installment_service(
    uow: UnitOfWorkDep,
    gate: AccessGateDep,
    events: EventPublisherDep,
) -> InstallmentService:
    """Get an InstallmentService instance."""
    return InstallmentService(unit_of_work=uow, access_gate=gate, event_publisher=events)


def get_overdue_service(
    uow: UnitOfWorkDep,
    gate: AccessGateDep,
    events: EventPublisherDep,
) -> OverdueService:
    """Get an OverdueService instance."""
    return OverdueService(unit_of_work=uow, access_gate=gate, event_publisher=events)
