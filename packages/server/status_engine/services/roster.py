"""
Roster column catalog: base columns plus org custom columns, and the subset
a role is allowed to see.
"""

from __future__ import annotations

from typing import Iterable

from status_engine.core.auth import OrgActor
from status_engine.core.permissions import column_allowed
from status_engine.models import Role
from status_engine.repositories.base import UnitOfWork
from status_engine_shared.schemas.roster import BASE_ROSTER_COLUMNS, RosterColumnInfo


async def get_roster_columns(uow: UnitOfWork, org_id: int) -> list[RosterColumnInfo]:
    custom = await uow.roster_columns.list_custom(org_id)
    return [*BASE_ROSTER_COLUMNS, *(column.to_info() for column in custom)]


def visible_columns(role: Role, columns: Iterable[RosterColumnInfo]) -> list[RosterColumnInfo]:
    """Columns granted by the role that its PII/PHI flags also cover."""
    grants = role.roster_column_permissions
    return [
        column
        for column in columns
        if grants[column.name] and column_allowed(column, role.can_view_pii, role.can_view_phi)
    ]


async def allowed_roster_columns(uow: UnitOfWork, actor: OrgActor) -> list[RosterColumnInfo]:
    if actor.role is None:
        return []
    columns = await get_roster_columns(uow, actor.org_id)
    return visible_columns(actor.role, columns)
