"""
Domain Interfaces (Ports)
"""

from .repositories import (
    InstallmentRepository,
    MemberRepository,
    OrderRepository,
    UnitOfWork,
)
from .clients import AccessGate, EventPublisher

__all__ = [
    "InstallmentRepository",
    "MemberRepository",
    "OrderRepository",
    "UnitOfWork",
    "AccessGate",
    "EventPublisher",
]
