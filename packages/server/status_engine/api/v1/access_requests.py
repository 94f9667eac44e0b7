"""
Access Request API endpoints.

GET    /api/v1/orgs/{orgId}/access-requests          — List pending requests (group managers)
POST   /api/v1/orgs/{orgId}/access-requests          — Issue a request for the caller
DELETE /api/v1/orgs/{orgId}/access-requests          — Cancel the caller's request
POST   /api/v1/orgs/{orgId}/access-requests/approve  — Approve with a role
POST   /api/v1/orgs/{orgId}/access-requests/deny     — Deny
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from status_engine.core.auth import OrgActor, get_current_user, parse_org_id, require_group_manager
from status_engine.core.database import get_uow
from status_engine.models import User
from status_engine.repositories.base import UnitOfWork
from status_engine.services import access_requests as access_request_service
from status_engine_shared.schemas.access_requests import (
    AccessRequestBody,
    AccessRequestResponse,
    ApproveAccessRequestBody,
    ApproveAccessRequestResponse,
)

router = APIRouter()


@router.get("", response_model=list[AccessRequestResponse])
async def list_access_requests(
    auth: OrgActor = Depends(require_group_manager),
    uow: UnitOfWork = Depends(get_uow),
):
    """List the org's pending access requests with requesting user and org."""
    return await access_request_service.list_pending_requests(uow, auth.org_id)


@router.post("", response_model=AccessRequestResponse, status_code=201)
async def issue_access_request(
    orgId: str,
    user: User = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_uow),
):
    """Request access to the org. Replaces a previously denied request."""
    return await access_request_service.issue_access_request(uow, user, parse_org_id(orgId))


@router.delete("", status_code=204)
async def cancel_access_request(
    orgId: str,
    user: User = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_uow),
):
    """Withdraw the caller's own access request."""
    await access_request_service.cancel_access_request(uow, user, parse_org_id(orgId))


@router.post("/approve", response_model=ApproveAccessRequestResponse)
async def approve_access_request(
    body: ApproveAccessRequestBody,
    auth: OrgActor = Depends(require_group_manager),
    uow: UnitOfWork = Depends(get_uow),
):
    """Approve a pending request, granting the requester the given role."""
    request = await access_request_service.approve_access_request(
        uow, auth, body.request_id, body.role_id
    )
    return {"success": True, "request": request}


@router.post("/deny", response_model=AccessRequestResponse)
async def deny_access_request(
    body: AccessRequestBody,
    auth: OrgActor = Depends(require_group_manager),
    uow: UnitOfWork = Depends(get_uow),
):
    """Deny a pending request. The request stays visible to its owner."""
    return await access_request_service.deny_access_request(uow, auth, body.request_id)
