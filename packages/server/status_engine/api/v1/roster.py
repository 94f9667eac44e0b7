"""
Roster column catalog endpoints.

GET /api/v1/orgs/{orgId}/roster/columns          — Full column catalog
GET /api/v1/orgs/{orgId}/roster/allowed-columns  — Columns the caller's role may see
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from status_engine.core.auth import OrgActor, require_member
from status_engine.core.database import get_uow
from status_engine.repositories.base import UnitOfWork
from status_engine.services import roster as roster_service
from status_engine_shared.schemas.roster import RosterColumnListResponse

router = APIRouter()


@router.get("/columns", response_model=RosterColumnListResponse)
async def list_roster_columns(
    auth: OrgActor = Depends(require_member),
    uow: UnitOfWork = Depends(get_uow),
):
    columns = await roster_service.get_roster_columns(uow, auth.org_id)
    return RosterColumnListResponse(data=columns)


@router.get("/allowed-columns", response_model=RosterColumnListResponse)
async def list_allowed_roster_columns(
    auth: OrgActor = Depends(require_member),
    uow: UnitOfWork = Depends(get_uow),
):
    columns = await roster_service.allowed_roster_columns(uow, auth)
    return RosterColumnListResponse(data=columns)
