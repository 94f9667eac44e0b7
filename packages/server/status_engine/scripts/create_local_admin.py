"""
Script to bootstrap an org with a group-manager user for local testing.

Approving access requests needs an existing member with the manage-group
permission; this creates one and prints a session token for it.

Usage:
    python -m status_engine.scripts.create_local_admin --edipi 1234567890 --org "Local Org"
"""

from __future__ import annotations

import argparse
import asyncio

import structlog

from status_engine.core.auth import create_jwt
from status_engine.core.database import init_db, unit_of_work
from status_engine.core.logging import configure_logging
from status_engine.models import Org, Role, User
from status_engine.repositories.base import UnitOfWork
from status_engine.services.roles import build_role
from status_engine.services.roster import get_roster_columns
from status_engine_shared.schemas.common import CAPABILITY_FLAGS
from status_engine_shared.schemas.roles import RoleRequest

log = structlog.get_logger()

ADMIN_ROLE_NAME = "Admin"


async def bootstrap_admin(uow: UnitOfWork, edipi: str, org_name: str) -> tuple[Org, User, Role]:
    """Ensure org, registered user, an all-permissions role and the membership exist."""
    user = await uow.users.get(edipi)
    if not user:
        user = await uow.users.add(User(edipi=edipi, is_registered=True, user_roles=[]))
        log.info("bootstrap.user_created", edipi=edipi)

    # The user row must exist before the org references it as contact.
    org = await uow.orgs.find_by_name(org_name)
    if not org:
        org = await uow.orgs.add(
            Org(name=org_name, description=f"{org_name} (local)", contact_edipi=edipi)
        )
        log.info("bootstrap.org_created", org=org_name)

    membership = user.role_in_org(org.id)
    if membership:
        log.info("bootstrap.already_member", edipi=edipi, org_id=org.id)
        return org, user, membership.role

    columns = await get_roster_columns(uow, org.id)
    role = await build_role(
        uow,
        org.id,
        RoleRequest(
            name=ADMIN_ROLE_NAME,
            description="Full access to the organization",
            allowed_roster_columns=[column.name for column in columns],
            **{flag: True for flag in CAPABILITY_FLAGS},
        ),
    )
    await uow.users.add_role(user, role)

    log.info("bootstrap.admin_added", edipi=edipi, org_id=org.id, role_id=role.id)
    return org, user, role


async def main(edipi: str, org_name: str) -> None:
    await init_db()
    async with unit_of_work() as uow:
        org, user, role = await bootstrap_admin(uow, edipi, org_name)
    token, _ = create_jwt(user.edipi)
    print(f"Org {org.id} ({org.name}); {user.edipi} holds role '{role.name}'.")
    print(f"Session token: {token}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create a local group-manager user.")
    parser.add_argument("--edipi", required=True, help="EDIPI of the user")
    parser.add_argument("--org", default="Local Org", help="Organization name")
    args = parser.parse_args()

    configure_logging("info", "text")
    asyncio.run(main(args.edipi, args.org))
