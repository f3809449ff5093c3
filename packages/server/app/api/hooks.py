"""
Webhooks posted by the external auth subsystem.

POST   /hooks/principal-created  — A principal signed up; create its profile
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import verify_auth_hook
from app.core.database import get_session
from app.services import profiles as profile_service
from roadmap_hub_shared.schemas.common import ErrorResponse
from roadmap_hub_shared.schemas.profiles import PrincipalCreatedEvent

router = APIRouter(responses={status: {"model": ErrorResponse} for status in (401, 422)})


@router.post(
    "/principal-created",
    status_code=204,
    dependencies=[Depends(verify_auth_hook)],
    tags=["Hooks"],
)
async def principal_created(
    body: PrincipalCreatedEvent,
    session: AsyncSession = Depends(get_session),
):
    await profile_service.handle_principal_created(body, session)
