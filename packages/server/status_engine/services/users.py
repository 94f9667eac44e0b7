"""
User membership service: profile lookup, member listing, role replacement
and removal.
"""

from __future__ import annotations

from typing import Optional

import structlog

from status_engine.core.auth import OrgActor
from status_engine.core.errors import BadRequestError, NotFoundError, UnauthorizedError
from status_engine.models import User, UserRole
from status_engine.repositories.base import UnitOfWork

log = structlog.get_logger()


def _member_info(user: User, user_role: UserRole) -> dict:
    return {
        "user": user,
        "role": user_role.role,
        "index_prefix": user_role.index_prefix,
    }


async def get_user_profile(uow: UnitOfWork, edipi: str) -> User:
    """A user with every membership (role and org) loaded."""
    user = await uow.users.get(edipi)
    if not user:
        raise NotFoundError("User was not found")
    return user


async def list_org_members(uow: UnitOfWork, org_id: int) -> list[dict]:
    memberships = await uow.users.list_org_members(org_id)
    return [_member_info(user_role.user, user_role) for user_role in memberships]


async def _get_membership(uow: UnitOfWork, org_id: int, edipi: str) -> tuple[User, UserRole]:
    user = await uow.users.get(edipi)
    user_role = user.role_in_org(org_id) if user else None
    if not user or not user_role:
        raise NotFoundError("User does not have a role in the organization")
    return user, user_role


async def change_member_role(
    uow: UnitOfWork, actor: OrgActor, edipi: str, role_id: Optional[int]
) -> dict:
    """Replace a member's role. The new role must not exceed the actor's own."""
    if not role_id:
        raise BadRequestError("Missing role id")

    role = await uow.roles.get(actor.org_id, role_id)
    if not role:
        raise NotFoundError("Role was not found")

    if actor.role is None or not actor.role.is_superset_of(role):
        raise UnauthorizedError(
            "Unable to assign a role with greater permissions than your current role."
        )

    user, user_role = await _get_membership(uow, actor.org_id, edipi)
    await uow.users.replace_role(user_role, role)

    log.info(
        "user_role.changed",
        edipi=edipi,
        org_id=actor.org_id,
        role_id=role.id,
        actor=actor.edipi,
    )
    return _member_info(user, user_role)


async def remove_org_member(uow: UnitOfWork, actor: OrgActor, edipi: str) -> None:
    """Remove a user's role in the org. Access is revoked immediately."""
    _, user_role = await _get_membership(uow, actor.org_id, edipi)
    await uow.users.remove_role(user_role)
    log.info("user_role.removed", edipi=edipi, org_id=actor.org_id, actor=actor.edipi)
