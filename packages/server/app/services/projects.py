"""
Project service. Projects are gated by the membership predicate: viewers
read, editors write.
"""

from __future__ import annotations

import uuid

import structlog
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.auth import Principal
from app.core.permissions import require_org_role, require_visible_org
from app.models.project import Project
from roadmap_hub_shared.schemas.common import Role
from roadmap_hub_shared.schemas.projects import ProjectCreate

log = structlog.get_logger()


async def list_projects(
    org_id: uuid.UUID, principal: Principal, session: AsyncSession
) -> list[Project]:
    await require_visible_org(org_id, principal.id, session)
    result = await session.execute(
        select(Project)
        .where(Project.organization_id == org_id)
        .order_by(Project.created_at.desc())
    )
    return list(result.scalars().all())


async def create_project(
    org_id: uuid.UUID,
    req: ProjectCreate,
    principal: Principal,
    session: AsyncSession,
) -> Project:
    await require_visible_org(org_id, principal.id, session)
    await require_org_role(org_id, principal.id, Role.EDITOR, session)

    project = Project(
        organization_id=org_id,
        name=req.name,
        description=req.description,
        status=req.status.value,
        created_by=principal.id,
    )
    session.add(project)
    await session.flush()

    log.info("project.created", project_id=str(project.id), org_id=str(org_id))
    return project
