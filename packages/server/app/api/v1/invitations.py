"""
Invitation inbox endpoints (for the invitee).

GET    /api/v1/invitations                    — Pending invitations for my email
POST   /api/v1/invitations/{invitationId}/accept
POST   /api/v1/invitations/{invitationId}/decline
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import Principal, get_current_principal
from app.core.database import get_session
from app.services import invitations as invitation_service
from roadmap_hub_shared.schemas.invitations import (
    InvitationListResponse,
    InvitationResponse,
)

router = APIRouter()


@router.get("", response_model=InvitationListResponse, tags=["Invitations"])
async def list_my_invitations(
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
):
    items = await invitation_service.list_pending_invitations_for_principal(
        principal, session
    )
    return InvitationListResponse(data=[InvitationResponse(**item) for item in items])


@router.post("/{invitationId}/accept", status_code=204, tags=["Invitations"])
async def accept_invitation(
    invitationId: uuid.UUID,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
):
    """Join the org at the invited role (or switch to it if already a member)."""
    await invitation_service.accept_invitation(invitationId, principal, session)


@router.post("/{invitationId}/decline", status_code=204, tags=["Invitations"])
async def decline_invitation(
    invitationId: uuid.UUID,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
):
    await invitation_service.decline_invitation(invitationId, principal, session)
