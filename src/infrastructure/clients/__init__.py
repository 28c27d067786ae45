"""External collaborator implementations."""

from .access_gate import RoleBasedAccessGate
from .event_publisher import HttpEventPublisher, LoggingEventPublisher

__all__ = [
    "RoleBasedAccessGate",
    "HttpEventPublisher",
    "LoggingEventPublisher",
]
