"""
Role service: create, update and delete org roles.

Every write goes through ``_apply_role_request`` so that stored roles always
respect the permission hierarchy (see ``core.permissions``): implied flags
are switched on, PII/PHI come from the workspace when one is bound, and
roster column grants are filtered by PII/PHI visibility.
"""

from __future__ import annotations

from typing import Sequence

import structlog

from status_engine.core.auth import OrgActor
from status_engine.core.errors import BadRequestError, NotFoundError, UnauthorizedError
from status_engine.core.permissions import (
    PermissionSet,
    apply_capability_hierarchy,
    filter_roster_columns,
    workspace_roster_columns,
)
from status_engine.models import Role
from status_engine.repositories.base import UnitOfWork
from status_engine.services.roster import get_roster_columns
from status_engine_shared.schemas.common import CAPABILITY_FLAGS
from status_engine_shared.schemas.roles import RoleRequest

log = structlog.get_logger()

ROLE_TOO_BROAD = "Unable to define a role with greater permissions than your current role."


async def list_roles(uow: UnitOfWork, org_id: int) -> Sequence[Role]:
    return await uow.roles.list_for_org(org_id)


async def get_role(uow: UnitOfWork, org_id: int, role_id: int) -> Role:
    role = await uow.roles.get(org_id, role_id)
    if not role:
        raise NotFoundError("Role was not found")
    return role


async def _apply_role_request(uow: UnitOfWork, org_id: int, role: Role, req: RoleRequest) -> None:
    if not req.name.strip():
        raise BadRequestError("Role name is required")
    if not req.description.strip():
        raise BadRequestError("Role description is required")

    workspace = None
    if req.workspace_id is not None:
        workspace = await uow.workspaces.get(org_id, req.workspace_id)
        if not workspace:
            raise NotFoundError("Workspace was not found")

    flags = req.model_dump(include=set(CAPABILITY_FLAGS))
    if workspace:
        flags["can_view_pii"] = workspace.pii
        flags["can_view_phi"] = workspace.phi
    flags = apply_capability_hierarchy(flags)

    columns = await get_roster_columns(uow, org_id)
    if workspace:
        roster_columns = workspace_roster_columns(
            columns, flags["can_view_pii"], flags["can_view_phi"]
        )
    else:
        roster_columns = filter_roster_columns(
            PermissionSet(req.allowed_roster_columns),
            columns,
            flags["can_view_pii"],
            flags["can_view_phi"],
        )

    role.name = req.name.strip()
    role.description = req.description.strip()
    role.default_index_prefix = req.default_index_prefix
    role.workspace = workspace
    role.workspace_id = workspace.id if workspace else None
    role.allowed_roster_columns = roster_columns
    role.allowed_notification_events = PermissionSet(req.allowed_notification_events).to_dict()
    for flag, value in flags.items():
        setattr(role, flag, value)


def _actor_ceiling(actor: OrgActor) -> Role:
    """Detached copy of the actor's permissions, taken before any edit."""
    if actor.role is None:
        raise UnauthorizedError(ROLE_TOO_BROAD)
    return Role(
        org_id=actor.org_id,
        name=actor.role.name,
        allowed_roster_columns=dict(actor.role.allowed_roster_columns),
        allowed_notification_events=dict(actor.role.allowed_notification_events),
        **actor.role.capabilities(),
    )


def _require_within(ceiling: Role, role: Role, actor: OrgActor) -> None:
    if not ceiling.is_superset_of(role):
        log.info("role.write_unauthorized", role_id=role.id, actor=actor.edipi)
        raise UnauthorizedError(ROLE_TOO_BROAD)


async def build_role(uow: UnitOfWork, org_id: int, req: RoleRequest) -> Role:
    """Persist a new role for ``org_id`` from ``req``, hierarchy applied."""
    role = Role(org_id=org_id)
    await _apply_role_request(uow, org_id, role, req)
    return await uow.roles.add(role)


async def create_role(uow: UnitOfWork, actor: OrgActor, req: RoleRequest) -> Role:
    """Create a role no broader than the actor's own."""
    ceiling = _actor_ceiling(actor)
    role = Role(org_id=actor.org_id)
    await _apply_role_request(uow, actor.org_id, role, req)
    _require_within(ceiling, role, actor)
    await uow.roles.add(role)
    log.info("role.created", role_id=role.id, org_id=actor.org_id, actor=actor.edipi)
    return role


async def update_role(uow: UnitOfWork, actor: OrgActor, role_id: int, req: RoleRequest) -> Role:
    """Replace a role's definition. The result may not exceed the actor's own role,
    which is checked against the actor's permissions as they were before the edit."""
    ceiling = _actor_ceiling(actor)
    role = await get_role(uow, actor.org_id, role_id)
    await _apply_role_request(uow, actor.org_id, role, req)
    _require_within(ceiling, role, actor)
    await uow.flush()
    log.info("role.updated", role_id=role.id, org_id=actor.org_id, actor=actor.edipi)
    return role


async def delete_role(uow: UnitOfWork, actor: OrgActor, role_id: int) -> None:
    role = await get_role(uow, actor.org_id, role_id)
    if await uow.roles.count_holders(role.id):
        raise BadRequestError("Cannot delete a role that is assigned to users")
    await uow.roles.delete(role)
    log.info("role.deleted", role_id=role_id, org_id=actor.org_id, actor=actor.edipi)
