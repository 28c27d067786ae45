"""Member record, as far as the billing engine touches it."""

from dataclasses import dataclass


@dataclass
class Member:
    """
    A paying customer.

    Only the lifetime-spend aggregate is maintained here; the rest of the
    member record is owned by the CRM side of the system.
    """

    id: str
    name: str
    branch_id: str | None = None
    total_spent: int = 0
