"""Database infrastructure."""

from .connection import DatabaseSessionManager, db_manager
from .models import Base, InstallmentModel, MemberModel, OrderModel

__all__ = [
    "DatabaseSessionManager",
    "db_manager",
    "Base",
    "InstallmentModel",
    "MemberModel",
    "OrderModel",
]
