from enum import Enum
from typing import Optional
from pydantic import BaseModel


class Role(str, Enum):
    ADMIN = "admin"
    EDITOR = "editor"
    VIEWER = "viewer"


# Lattice levels; a missing membership counts as 0 (below viewer)
ROLE_LEVELS: dict["Role", int] = {
    Role.ADMIN: 3,
    Role.EDITOR: 2,
    Role.VIEWER: 1,
}


def role_level(role: Optional[Role | str]) -> int:
    """Numeric level of a role; ``None`` (not a member) is 0."""
    if role is None:
        return 0
    return ROLE_LEVELS[Role(role)]


def role_at_least(role: Optional[Role | str], min_role: Role | str) -> bool:
    """True if ``role`` is at least as privileged as ``min_role``."""
    return role_level(role) >= role_level(min_role)


class ProjectStatus(str, Enum):
    PLANNED = "planned"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ErrorBody(BaseModel):
    code: str
    message: str
    status: int


class ErrorResponse(BaseModel):
    error: ErrorBody
