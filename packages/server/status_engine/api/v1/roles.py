"""
Role API endpoints.

GET    /api/v1/orgs/{orgId}/roles            — List roles (members)
POST   /api/v1/orgs/{orgId}/roles            — Create a role (group managers)
GET    /api/v1/orgs/{orgId}/roles/{roleId}   — Get a role (members)
PUT    /api/v1/orgs/{orgId}/roles/{roleId}   — Replace a role (group managers)
DELETE /api/v1/orgs/{orgId}/roles/{roleId}   — Delete an unassigned role (group managers)
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from status_engine.core.auth import OrgActor, require_group_manager, require_member
from status_engine.core.database import get_uow
from status_engine.repositories.base import UnitOfWork
from status_engine.services import roles as role_service
from status_engine_shared.schemas.roles import RoleRequest, RoleResponse

router = APIRouter()


@router.get("", response_model=list[RoleResponse])
async def list_roles(
    auth: OrgActor = Depends(require_member),
    uow: UnitOfWork = Depends(get_uow),
):
    return await role_service.list_roles(uow, auth.org_id)


@router.post("", response_model=RoleResponse, status_code=201)
async def create_role(
    body: RoleRequest,
    auth: OrgActor = Depends(require_group_manager),
    uow: UnitOfWork = Depends(get_uow),
):
    """Create a role. Implied permissions are filled in and PII/PHI columns gated."""
    return await role_service.create_role(uow, auth, body)


@router.get("/{roleId}", response_model=RoleResponse)
async def get_role(
    roleId: int,
    auth: OrgActor = Depends(require_member),
    uow: UnitOfWork = Depends(get_uow),
):
    return await role_service.get_role(uow, auth.org_id, roleId)


@router.put("/{roleId}", response_model=RoleResponse)
async def update_role(
    roleId: int,
    body: RoleRequest,
    auth: OrgActor = Depends(require_group_manager),
    uow: UnitOfWork = Depends(get_uow),
):
    return await role_service.update_role(uow, auth, roleId, body)


@router.delete("/{roleId}", status_code=204)
async def delete_role(
    roleId: int,
    auth: OrgActor = Depends(require_group_manager),
    uow: UnitOfWork = Depends(get_uow),
):
    await role_service.delete_role(uow, auth, roleId)
