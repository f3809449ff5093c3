"""
Organization API endpoints.

GET    /api/v1/orgs                      — List orgs for the authenticated principal
POST   /api/v1/orgs                      — Create an org; the creator becomes its admin
GET    /api/v1/orgs/{orgId}              — Get org details (members only)
GET    /api/v1/orgs/{orgId}/members      — List members (members only)
POST   /api/v1/orgs/{orgId}/invitations  — Invite by email (admin only)
GET    /api/v1/orgs/{orgId}/invitations  — List invitations visible to the caller
"""

from __future__ import annotations

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import Principal, get_current_principal
from app.core.database import get_session
from app.core.permissions import require_visible_org
from app.services import invitations as invitation_service
from app.services import memberships as membership_service
from app.services import organizations as org_service
from roadmap_hub_shared.schemas.invitations import (
    InvitationListResponse,
    InvitationResponse,
    InvitationStatus,
    InviteRequest,
)
from roadmap_hub_shared.schemas.members import MemberListResponse, MemberResponse
from roadmap_hub_shared.schemas.organizations import (
    OrgCreateRequest,
    OrgListResponse,
    OrgResponse,
)

router = APIRouter()


@router.get("", response_model=OrgListResponse, tags=["Organizations"])
async def list_orgs(
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
):
    """List orgs the authenticated principal belongs to."""
    items = await org_service.list_principal_orgs(principal, session)
    return OrgListResponse(data=items)


@router.post("", response_model=OrgResponse, status_code=201, tags=["Organizations"])
async def create_org(
    body: OrgCreateRequest,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
):
    """Create a new organization. The creator becomes its first admin."""
    org = await org_service.create_organization_and_assign_admin(body, principal, session)
    return OrgResponse.model_validate(org)


@router.get("/{orgId}", response_model=OrgResponse, tags=["Organizations"])
async def get_org(
    orgId: uuid.UUID,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
):
    org = await org_service.get_org(orgId, principal, session)
    return OrgResponse.model_validate(org)


@router.get("/{orgId}/members", response_model=MemberListResponse, tags=["Members"])
async def list_members(
    orgId: uuid.UUID,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
):
    """List all members of the org (any role)."""
    await require_visible_org(orgId, principal.id, session)
    items = await membership_service.list_members(orgId, session)
    return MemberListResponse(data=[MemberResponse(**item) for item in items])


@router.post(
    "/{orgId}/invitations",
    response_model=InvitationResponse,
    status_code=201,
    tags=["Invitations"],
)
async def invite_member(
    orgId: uuid.UUID,
    body: InviteRequest,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
):
    """Invite someone by email at a given role (Admin only)."""
    info = await invitation_service.invite_member(orgId, body, principal, session)
    return InvitationResponse(**info)


@router.get(
    "/{orgId}/invitations",
    response_model=InvitationListResponse,
    tags=["Invitations"],
)
async def list_org_invitations(
    orgId: uuid.UUID,
    status: Optional[InvitationStatus] = Query(None),
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
):
    """Admins see every invitation of the org; other members only their own."""
    items = await invitation_service.list_org_invitations(
        orgId, principal, session, status=status
    )
    return InvitationListResponse(data=[InvitationResponse(**item) for item in items])
