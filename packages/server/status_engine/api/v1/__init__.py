"""
API v1 Router

All org-scoped endpoints are prefixed with /orgs/{orgId}.
"""

from fastapi import APIRouter

from status_engine_shared.schemas.common import ErrorResponse

from . import access_requests, roles, roster, users

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
}

router = APIRouter(responses=ERROR_RESPONSES)

# User routes (non-org-scoped)
router.include_router(users.router_global)

# Org-scoped resource routers
router.include_router(
    access_requests.router, prefix="/orgs/{orgId}/access-requests", tags=["Access Requests"]
)
router.include_router(roles.router, prefix="/orgs/{orgId}/roles", tags=["Roles"])
router.include_router(roster.router, prefix="/orgs/{orgId}/roster", tags=["Roster"])
router.include_router(users.router, prefix="/orgs/{orgId}/users", tags=["Users"])


@router.get("/", tags=["API"])
async def api_root():
    """API root — returns version and available endpoints."""
    return {
        "api": "v1",
        "version": "0.1.0",
        "endpoints": [
            "/users/current",
            "/orgs/{orgId}/access-requests",
            "/orgs/{orgId}/roles",
            "/orgs/{orgId}/roster",
            "/orgs/{orgId}/users",
        ],
    }
