"""
Membership API endpoints.

PATCH  /api/v1/members/{membershipId}  — Change a member's role (Admin only)
DELETE /api/v1/members/{membershipId}  — Remove a member (Admin only)
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import Principal, get_current_principal
from app.core.database import get_session
from app.services import memberships as membership_service
from roadmap_hub_shared.schemas.members import MemberResponse, MemberRoleUpdateRequest

router = APIRouter()


@router.patch("/{membershipId}", response_model=MemberResponse, tags=["Members"])
async def update_member_role(
    membershipId: uuid.UUID,
    body: MemberRoleUpdateRequest,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
):
    """Change a member's role. The last admin of an org cannot be demoted."""
    info = await membership_service.update_member_role(
        membershipId, body.role, principal, session
    )
    return MemberResponse(**info)


@router.delete("/{membershipId}", status_code=204, tags=["Members"])
async def remove_member(
    membershipId: uuid.UUID,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
):
    """Remove a member. The last admin of an org cannot be removed."""
    await membership_service.remove_member(membershipId, principal, session)
