"""The authenticated caller of an operation."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Role(str, Enum):
    BOSS = "BOSS"
    BRANCH_MANAGER = "BRANCH_MANAGER"
    ARTIST = "ARTIST"
    MEMBER = "MEMBER"


@dataclass(frozen=True)
class Actor:
    """Identity, role and optional branch scope supplied by authentication."""

    id: str
    role: Role
    branch_id: Optional[str] = None
