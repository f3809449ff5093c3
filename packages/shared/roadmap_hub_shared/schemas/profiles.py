"""Principal profile schemas (fed by the external auth subsystem)."""

from __future__ import annotations

import uuid
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class PrincipalCreatedEvent(BaseModel):
    """Payload the auth subsystem posts when a new principal signs up."""
    id: uuid.UUID
    email: EmailStr
    full_name: Optional[str] = Field(default=None, max_length=200)
    avatar_url: Optional[str] = None
