"""
API v1 Router

Org-scoped endpoints are prefixed with /orgs/{orgId}; membership and
invitation actions address their rows by id.
"""

from fastapi import APIRouter

from roadmap_hub_shared.schemas.common import ErrorResponse
from . import invitations, members, organizations, projects

# Every failure is rendered as {"error": {code, message, status}}
ERROR_RESPONSES = {
    status: {"model": ErrorResponse} for status in (401, 403, 404, 409, 422)
}

router = APIRouter(responses=ERROR_RESPONSES)

router.include_router(organizations.router, prefix="/orgs", tags=["Organizations"])
router.include_router(projects.router, prefix="/orgs/{orgId}/projects", tags=["Projects"])
router.include_router(members.router, prefix="/members", tags=["Members"])
router.include_router(invitations.router, prefix="/invitations", tags=["Invitations"])


@router.get("/", tags=["API"])
async def api_root():
    """API root — returns version and available endpoints."""
    return {
        "api": "v1",
        "version": "0.1.0",
        "endpoints": [
            "/orgs",
            "/orgs/{orgId}/members",
            "/orgs/{orgId}/invitations",
            "/orgs/{orgId}/projects",
            "/members/{membershipId}",
            "/invitations",
        ],
    }
