"""
Membership service — the membership store plus the role-change and removal
procedures.

The store functions (``add_member``, ``set_role``, ``delete_member`` …) do
not enforce the "at least one admin" invariant; the procedures do, after
locking the organization row so the admin count they read cannot change
before they write.
"""

from __future__ import annotations

import uuid
from typing import Optional

import structlog
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.auth import Principal
from app.core.errors import DuplicateMembership, LastAdminError, NotFound
from app.core.permissions import require_org_role
from app.models.membership import Membership
from app.models.organization import Organization
from app.models.profile import Profile
from roadmap_hub_shared.schemas.common import Role

log = structlog.get_logger()


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------

async def lock_organization(org_id: uuid.UUID, session: AsyncSession) -> Organization:
    """Row-lock the organization so its membership set is mutated serially."""
    result = await session.execute(
        select(Organization).where(Organization.id == org_id).with_for_update()
    )
    org = result.scalar_one_or_none()
    if not org:
        raise NotFound("Organization not found")
    return org


async def get_membership(
    org_id: uuid.UUID, principal_id: uuid.UUID, session: AsyncSession
) -> Optional[Membership]:
    result = await session.execute(
        select(Membership).where(
            Membership.organization_id == org_id,
            Membership.principal_id == principal_id,
        )
    )
    return result.scalar_one_or_none()


async def get_role(
    org_id: uuid.UUID, principal_id: uuid.UUID, session: AsyncSession
) -> Optional[Role]:
    membership = await get_membership(org_id, principal_id, session)
    return Role(membership.role) if membership else None


async def add_member(
    org_id: uuid.UUID,
    principal_id: uuid.UUID,
    role: Role,
    session: AsyncSession,
) -> Membership:
    """Insert a membership; the (org, principal) pair must be new."""
    if await get_membership(org_id, principal_id, session):
        raise DuplicateMembership()

    membership = Membership(
        organization_id=org_id,
        principal_id=principal_id,
        role=role.value,
    )
    session.add(membership)
    try:
        async with session.begin_nested():
            await session.flush()
    except IntegrityError:
        raise DuplicateMembership()
    return membership


async def set_role(membership: Membership, new_role: Role, session: AsyncSession) -> Membership:
    membership.role = new_role.value
    session.add(membership)
    await session.flush()
    return membership


async def delete_member(membership: Membership, session: AsyncSession) -> None:
    await session.delete(membership)
    await session.flush()


async def count_admins(org_id: uuid.UUID, session: AsyncSession) -> int:
    result = await session.execute(
        select(func.count())
        .select_from(Membership)
        .where(
            Membership.organization_id == org_id,
            Membership.role == Role.ADMIN.value,
        )
    )
    return result.scalar_one()


async def list_members(org_id: uuid.UUID, session: AsyncSession) -> list[dict]:
    """All memberships of an org, with profile details where known."""
    result = await session.execute(
        select(Membership, Profile)
        .join(Profile, Profile.id == Membership.principal_id, isouter=True)
        .where(Membership.organization_id == org_id)
    )
    return [_member_dict(m, profile) for m, profile in result.all()]


def _member_dict(membership: Membership, profile: Optional[Profile] = None) -> dict:
    return {
        "id": membership.id,
        "organization_id": membership.organization_id,
        "principal_id": membership.principal_id,
        "role": membership.role,
        "email": profile.email if profile else None,
        "full_name": profile.full_name if profile else None,
        "avatar_url": profile.avatar_url if profile else None,
        "created_at": membership.created_at,
    }


async def ensure_admin_survives(
    membership: Membership, new_role: Optional[Role], session: AsyncSession
) -> None:
    """Raise LastAdminError if demoting/removing ``membership`` leaves zero admins.

    ``new_role`` of None means removal. Caller must hold the org lock.
    """
    if membership.role != Role.ADMIN.value or new_role == Role.ADMIN:
        return
    if await count_admins(membership.organization_id, session) <= 1:
        raise LastAdminError()


# ---------------------------------------------------------------------------
# Procedures
# ---------------------------------------------------------------------------

async def _load_membership(
    membership_id: uuid.UUID, session: AsyncSession, *, fresh: bool = False
) -> Membership:
    membership = await session.get(Membership, membership_id, populate_existing=fresh)
    if not membership:
        raise NotFound("Membership not found")
    return membership


async def _load_locked_membership(
    membership_id: uuid.UUID, actor: Principal, session: AsyncSession
) -> Membership:
    """Resolve the membership, lock its org, then authorize the actor as admin."""
    membership = await _load_membership(membership_id, session)
    await lock_organization(membership.organization_id, session)
    # re-read under the lock; a concurrent change may have committed meanwhile
    membership = await _load_membership(membership_id, session, fresh=True)
    await require_org_role(membership.organization_id, actor.id, Role.ADMIN, session)
    return membership


async def update_member_role(
    membership_id: uuid.UUID,
    new_role: Role,
    actor: Principal,
    session: AsyncSession,
) -> dict:
    """Change a member's role (admin only; never demotes the last admin)."""
    membership = await _load_locked_membership(membership_id, actor, session)
    org_id = membership.organization_id

    if membership.role == new_role.value:
        return await _member_with_profile(membership, session)

    await ensure_admin_survives(membership, new_role, session)
    previous = membership.role
    await set_role(membership, new_role, session)

    log.info(
        "member.role_updated",
        membership_id=str(membership.id),
        org_id=str(org_id),
        principal_id=str(membership.principal_id),
        previous_role=previous,
        role=new_role.value,
        actor=str(actor.id),
    )
    return await _member_with_profile(membership, session)


async def remove_member(
    membership_id: uuid.UUID,
    actor: Principal,
    session: AsyncSession,
) -> None:
    """Remove a member (admin only; the sole admin can never be removed)."""
    membership = await _load_locked_membership(membership_id, actor, session)
    org_id = membership.organization_id

    await ensure_admin_survives(membership, None, session)
    await delete_member(membership, session)

    log.info(
        "member.removed",
        membership_id=str(membership_id),
        org_id=str(org_id),
        principal_id=str(membership.principal_id),
        actor=str(actor.id),
    )


async def _member_with_profile(membership: Membership, session: AsyncSession) -> dict:
    profile = await session.get(Profile, membership.principal_id)
    return _member_dict(membership, profile)
