"""Organization membership schemas."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from .common import Role


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class MemberRoleUpdateRequest(BaseModel):
    """Change a member's role (admin only)."""
    role: Role


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class MemberResponse(BaseModel):
    """A membership row, enriched with the principal's profile when known."""
    id: uuid.UUID
    organization_id: uuid.UUID
    principal_id: uuid.UUID
    role: Role
    email: Optional[str] = None
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: datetime


class MemberListResponse(BaseModel):
    """Members of an org."""
    data: List[MemberResponse]
