"""
Organization service — creation (with its first admin) and read paths.
"""

from __future__ import annotations

import uuid

import structlog
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.auth import Principal
from app.core.errors import NotFound, ValidationError
from app.core.permissions import require_visible_org
from app.models.membership import Membership
from app.models.organization import Organization
from app.services.memberships import add_member
from roadmap_hub_shared.schemas.common import Role
from roadmap_hub_shared.schemas.organizations import OrgCreateRequest

log = structlog.get_logger()


async def list_principal_orgs(
    principal: Principal, session: AsyncSession
) -> list[dict]:
    """List all orgs a principal belongs to, with their role."""
    result = await session.execute(
        select(Organization, Membership.role)
        .join(Membership, Membership.organization_id == Organization.id)
        .where(Membership.principal_id == principal.id)
        .order_by(Organization.name)
    )
    rows = result.all()
    return [
        {
            "id": org.id,
            "name": org.name,
            "description": org.description,
            "role": role,
        }
        for org, role in rows
    ]


async def create_organization_and_assign_admin(
    req: OrgCreateRequest,
    creator: Principal,
    session: AsyncSession,
) -> Organization:
    """Create an org and make the creator its admin, as one unit of work.

    Both rows are written in the caller's transaction; if the membership
    insert fails the organization insert is rolled back with it.
    """
    name = req.name.strip()
    if not name:
        raise ValidationError("Organization name must not be blank")

    org = Organization(
        name=name,
        description=req.description,
        created_by=creator.id,
    )
    session.add(org)
    await session.flush()

    await add_member(org.id, creator.id, Role.ADMIN, session)

    log.info("org.created", org_id=str(org.id), name=org.name, creator=str(creator.id))
    return org


async def get_org(
    org_id: uuid.UUID, principal: Principal, session: AsyncSession
) -> Organization:
    """Get an org visible to the principal; raises NotFound otherwise."""
    await require_visible_org(org_id, principal.id, session)
    org = await session.get(Organization, org_id)
    if not org:
        raise NotFound("Organization not found")
    return org
