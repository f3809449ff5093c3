"""
Invitation schemas and the invitation lifecycle state machine.

An invitation is created ``pending`` and moves exactly once to either
``accepted`` or ``declined``. Both are terminal.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, EmailStr, field_validator

from .common import Role


class InvitationStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"


INVITATION_TRANSITIONS: dict[InvitationStatus, list[InvitationStatus]] = {
    InvitationStatus.PENDING: [InvitationStatus.ACCEPTED, InvitationStatus.DECLINED],
    InvitationStatus.ACCEPTED: [],
    InvitationStatus.DECLINED: [],
}


def can_transition(current: InvitationStatus | str, target: InvitationStatus | str) -> bool:
    """Whether an invitation in ``current`` may move to ``target``."""
    return InvitationStatus(target) in INVITATION_TRANSITIONS[InvitationStatus(current)]


def normalize_email(email: str) -> str:
    return email.strip().lower()


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class InviteRequest(BaseModel):
    email: EmailStr
    role: Role = Role.VIEWER

    @field_validator("email", mode="before")
    @classmethod
    def _normalize(cls, value):
        return normalize_email(value) if isinstance(value, str) else value


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class InvitationResponse(BaseModel):
    id: uuid.UUID
    organization_id: uuid.UUID
    invitee_email: str
    role: Role
    status: InvitationStatus
    invited_by: uuid.UUID
    organization_name: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class InvitationListResponse(BaseModel):
    data: list[InvitationResponse]
