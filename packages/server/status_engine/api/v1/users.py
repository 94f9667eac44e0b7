"""
User Management API endpoints.

GET    /api/v1/users/current                    — Caller profile with memberships
GET    /api/v1/orgs/{orgId}/users               — List org members (group managers)
PUT    /api/v1/orgs/{orgId}/users/{edipi}/role  — Replace a member's role
DELETE /api/v1/orgs/{orgId}/users/{edipi}       — Remove a member
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from status_engine.core.auth import OrgActor, get_current_user, require_group_manager
from status_engine.core.database import get_uow
from status_engine.models import User
from status_engine.repositories.base import UnitOfWork
from status_engine.services import users as user_service
from status_engine_shared.schemas.users import (
    ChangeRoleRequest,
    OrgMemberResponse,
    UserResponse,
)

# Non-org-scoped routes
router_global = APIRouter()


@router_global.get("/users/current", response_model=UserResponse, tags=["Users"])
async def get_current_user_profile(
    user: User = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_uow),
):
    """The caller's profile with every org membership."""
    return await user_service.get_user_profile(uow, user.edipi)


# Org-scoped routes
router = APIRouter()


@router.get("", response_model=list[OrgMemberResponse])
async def list_users(
    auth: OrgActor = Depends(require_group_manager),
    uow: UnitOfWork = Depends(get_uow),
):
    """List all members of the org with their roles."""
    return await user_service.list_org_members(uow, auth.org_id)


@router.put("/{edipi}/role", response_model=OrgMemberResponse)
async def change_user_role(
    edipi: str,
    body: ChangeRoleRequest,
    auth: OrgActor = Depends(require_group_manager),
    uow: UnitOfWork = Depends(get_uow),
):
    """Replace a member's role (never with a role broader than the caller's)."""
    return await user_service.change_member_role(uow, auth, edipi, body.role_id)


@router.delete("/{edipi}", status_code=204)
async def remove_user(
    edipi: str,
    auth: OrgActor = Depends(require_group_manager),
    uow: UnitOfWork = Depends(get_uow),
):
    """Remove a member from the org. Immediately revokes access."""
    await user_service.remove_org_member(uow, auth, edipi)
