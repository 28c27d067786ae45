"""Role-based implementation of AccessGate."""

from typing import Iterable

from src.core.config import settings
from src.domain.entities import Actor, Order, Role
from src.domain.interfaces import AccessGate


class RoleBasedAccessGate(AccessGate):
    """
    Access decisions from the actor's role and branch.

    Privileged roles may adjust, sweep and edit installments. The
    top-level role sees every branch; staff see orders of their own
    branch; members see only their own orders.
    """

    def __init__(
        self,
        privileged_roles: Iterable[str] | None = None,
        top_level_role: str | None = None,
    ):
        roles = privileged_roles if privileged_roles is not None else settings.privileged_roles
        self._privileged = frozenset(Role(role) for role in roles)
        self._top_level = Role(top_level_role or settings.top_level_role)

    def is_privileged(self, actor: Actor) -> bool:
        return actor.role in self._privileged

    def is_top_level(self, actor: Actor) -> bool:
        return actor.role == self._top_level

    def can_read_order(self, actor: Actor, order: Order) -> bool:
        if self.is_top_level(actor):
            return True

        if actor.role == Role.MEMBER:
            return actor.id == order.member_id

        return actor.branch_id is not None and actor.branch_id == order.branch_id
