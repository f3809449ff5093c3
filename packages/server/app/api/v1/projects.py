"""
Project endpoints (org-scoped).

GET    /api/v1/orgs/{orgId}/projects  — List projects (any member)
POST   /api/v1/orgs/{orgId}/projects  — Create a project (editor or admin)
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import Principal, get_current_principal
from app.core.database import get_session
from app.services import projects as project_service
from roadmap_hub_shared.schemas.projects import (
    ProjectCreate,
    ProjectListResponse,
    ProjectRead,
)

router = APIRouter()


@router.get("", response_model=ProjectListResponse)
async def list_projects(
    orgId: uuid.UUID,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
):
    projects = await project_service.list_projects(orgId, principal, session)
    return ProjectListResponse(data=[ProjectRead.model_validate(p) for p in projects])


@router.post("", response_model=ProjectRead, status_code=201)
async def create_project(
    orgId: uuid.UUID,
    body: ProjectCreate,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
):
    project = await project_service.create_project(orgId, body, principal, session)
    return ProjectRead.model_validate(project)
