"""
Invitation service — onboarding new principals by email.

Lifecycle: ``pending`` → ``accepted`` | ``declined`` (both terminal).
Status changes are compare-and-swap updates guarded by ``status = 'pending'``,
so two concurrent accepts of the same invitation cannot both succeed.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional

import structlog
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.auth import Principal
from app.core.config import get_settings
from app.core.errors import Forbidden, InvitationAlreadyActioned, NotFound
from app.core.permissions import require_org_role, require_visible_org
from app.models.invitation import Invitation
from app.models.organization import Organization
from app.services.memberships import (
    add_member,
    ensure_admin_survives,
    get_membership,
    lock_organization,
    set_role,
)
from roadmap_hub_shared.schemas.common import Role
from roadmap_hub_shared.schemas.invitations import (
    InvitationStatus,
    InviteRequest,
    can_transition,
    normalize_email,
)

log = structlog.get_logger()


def _invitation_dict(invitation: Invitation, organization_name: Optional[str] = None) -> dict:
    return {
        "id": invitation.id,
        "organization_id": invitation.organization_id,
        "invitee_email": invitation.invitee_email,
        "role": invitation.role,
        "status": invitation.status,
        "invited_by": invitation.invited_by,
        "organization_name": organization_name,
        "created_at": invitation.created_at,
        "updated_at": invitation.updated_at,
    }


async def invite_member(
    org_id: uuid.UUID,
    req: InviteRequest,
    inviter: Principal,
    session: AsyncSession,
) -> dict:
    """Create a pending invitation (admin only).

    Does not check whether the invitee already has an account or a
    membership. Repeated invitations to the same email are kept as separate
    rows unless ``collapse_duplicate_invitations`` is enabled.
    """
    await require_org_role(org_id, inviter.id, Role.ADMIN, session)
    email = normalize_email(req.email)

    if get_settings().collapse_duplicate_invitations:
        result = await session.execute(
            select(Invitation).where(
                Invitation.organization_id == org_id,
                Invitation.invitee_email == email,
                Invitation.status == InvitationStatus.PENDING.value,
            )
        )
        existing = result.scalars().first()
        if existing:
            existing.role = req.role.value
            existing.invited_by = inviter.id
            existing.updated_at = datetime.now(timezone.utc)
            session.add(existing)
            await session.flush()
            log.info(
                "invitation.refreshed",
                invitation_id=str(existing.id),
                org_id=str(org_id),
                role=existing.role,
            )
            return _invitation_dict(existing)

    invitation = Invitation(
        organization_id=org_id,
        invitee_email=email,
        role=req.role.value,
        status=InvitationStatus.PENDING.value,
        invited_by=inviter.id,
    )
    session.add(invitation)
    await session.flush()

    log.info(
        "invitation.created",
        invitation_id=str(invitation.id),
        org_id=str(org_id),
        role=invitation.role,
        invited_by=str(inviter.id),
    )
    return _invitation_dict(invitation)


async def _load_actionable(
    invitation_id: uuid.UUID,
    target: InvitationStatus,
    principal: Principal,
    session: AsyncSession,
) -> Invitation:
    invitation = await session.get(Invitation, invitation_id)
    if not invitation:
        raise NotFound("Invitation not found")
    if not can_transition(invitation.status, target):
        raise InvitationAlreadyActioned()
    if normalize_email(invitation.invitee_email) != principal.email:
        raise Forbidden("This invitation is addressed to another email")
    return invitation


async def _transition(
    invitation: Invitation, target: InvitationStatus, session: AsyncSession
) -> None:
    """Move a pending invitation to ``target``; zero rows updated means someone beat us."""
    result = await session.execute(
        update(Invitation)
        .where(
            Invitation.id == invitation.id,
            Invitation.status == InvitationStatus.PENDING.value,
        )
        .values(status=target.value, updated_at=datetime.now(timezone.utc))
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        raise InvitationAlreadyActioned()


async def accept_invitation(
    invitation_id: uuid.UUID, principal: Principal, session: AsyncSession
) -> None:
    """Accept an invitation: mark it accepted and upsert the membership."""
    invitation = await _load_actionable(
        invitation_id, InvitationStatus.ACCEPTED, principal, session
    )
    org_id = invitation.organization_id
    role = Role(invitation.role)

    await lock_organization(org_id, session)
    existing = await get_membership(org_id, principal.id, session)
    if existing:
        await ensure_admin_survives(existing, role, session)

    await _transition(invitation, InvitationStatus.ACCEPTED, session)

    if existing:
        if existing.role != role.value:
            await set_role(existing, role, session)
    else:
        await add_member(org_id, principal.id, role, session)

    log.info(
        "invitation.accepted",
        invitation_id=str(invitation_id),
        org_id=str(org_id),
        principal_id=str(principal.id),
        role=role.value,
        upgraded=existing is not None,
    )


async def decline_invitation(
    invitation_id: uuid.UUID, principal: Principal, session: AsyncSession
) -> None:
    invitation = await _load_actionable(
        invitation_id, InvitationStatus.DECLINED, principal, session
    )
    await _transition(invitation, InvitationStatus.DECLINED, session)
    log.info(
        "invitation.declined",
        invitation_id=str(invitation_id),
        org_id=str(invitation.organization_id),
        principal_id=str(principal.id),
    )


async def list_pending_invitations_for_principal(
    principal: Principal, session: AsyncSession
) -> list[dict]:
    """Pending invitations addressed to the principal's email, newest first."""
    result = await session.execute(
        select(Invitation, Organization.name)
        .join(Organization, Organization.id == Invitation.organization_id)
        .where(
            Invitation.invitee_email == principal.email,
            Invitation.status == InvitationStatus.PENDING.value,
        )
        .order_by(Invitation.created_at.desc())
    )
    return [_invitation_dict(inv, name) for inv, name in result.all()]


async def list_org_invitations(
    org_id: uuid.UUID,
    principal: Principal,
    session: AsyncSession,
    status: Optional[InvitationStatus] = None,
) -> list[dict]:
    """Invitations of an org: all for admins, only the caller's own otherwise."""
    role = await require_visible_org(org_id, principal.id, session)

    stmt = (
        select(Invitation, Organization.name)
        .join(Organization, Organization.id == Invitation.organization_id)
        .where(Invitation.organization_id == org_id)
    )
    if role != Role.ADMIN:
        stmt = stmt.where(Invitation.invitee_email == principal.email)
    if status is not None:
        stmt = stmt.where(Invitation.status == status.value)

    result = await session.execute(stmt.order_by(Invitation.created_at.desc()))
    return [_invitation_dict(inv, name) for inv, name in result.all()]
