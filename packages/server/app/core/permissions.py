"""
Authorization predicate.

``is_org_member`` is the single gate consulted by every mutation procedure
and every read path: a principal may act on an organization iff it holds a
membership whose role is at least ``min_role`` on the admin > editor > viewer
lattice. The predicate only reads; it never mutates state.
"""

from __future__ import annotations

import uuid

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.errors import Forbidden, NotFound
from app.models.membership import Membership
from roadmap_hub_shared.schemas.common import Role, role_at_least


async def get_principal_role(
    org_id: uuid.UUID, principal_id: uuid.UUID, session: AsyncSession
) -> Role | None:
    """The principal's role in the org, or None when not a member."""
    result = await session.execute(
        select(Membership.role).where(
            Membership.organization_id == org_id,
            Membership.principal_id == principal_id,
        )
    )
    role = result.scalar_one_or_none()
    return Role(role) if role is not None else None


async def is_org_member(
    org_id: uuid.UUID,
    principal_id: uuid.UUID,
    min_role: Role,
    session: AsyncSession,
) -> bool:
    role = await get_principal_role(org_id, principal_id, session)
    return role_at_least(role, min_role)


async def require_org_role(
    org_id: uuid.UUID,
    principal_id: uuid.UUID,
    min_role: Role,
    session: AsyncSession,
) -> None:
    """Raise Forbidden unless ``is_org_member`` holds for ``min_role``."""
    if not await is_org_member(org_id, principal_id, min_role, session):
        raise Forbidden(f"{min_role.value.capitalize()} access required")


async def require_visible_org(
    org_id: uuid.UUID, principal_id: uuid.UUID, session: AsyncSession
) -> Role:
    """Read-path gate: organizations outside the principal's memberships do not exist."""
    role = await get_principal_role(org_id, principal_id, session)
    if role is None:
        raise NotFound("Organization not found")
    return role
