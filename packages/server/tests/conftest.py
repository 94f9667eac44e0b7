"""
Shared fixtures: a fresh SQLite database per test, a seeded org world, and an
HTTP client wired to that database.
"""

from __future__ import annotations

import os

# Module-level engine in status_engine.core.database is built from settings at
# import time; point it at SQLite before anything imports it.
os.environ.setdefault("SE_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SE_DATABASE_ISOLATION_LEVEL", "")
os.environ.setdefault("SE_LOG_FORMAT", "text")

from types import SimpleNamespace

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

import status_engine.models  # noqa: F401
from status_engine.core.auth import OrgActor, create_jwt
from status_engine.core.database import get_uow, unit_of_work
from status_engine.main import app
from status_engine.models import CustomRosterColumn, Org, Role, User, UserRole, Workspace
from status_engine_shared.schemas.roster import BASE_ROSTER_COLUMNS

ADMIN = "1000000001"
MANAGER = "1000000002"
VIEWER = "1000000003"
REQUESTER = "2000000001"
UNREGISTERED = "2000000002"
OUTSIDER = "2000000003"

ALL_BASE_COLUMNS = {column.name: True for column in BASE_ROSTER_COLUMNS}


@pytest.fixture
async def session_factory(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
async def world(session_factory):
    """Two orgs, a handful of users and roles, and the admin/manager/viewer memberships.

    Roles are inserted as-is (no hierarchy applied) so each test controls the
    exact permissions involved.
    """
    async with session_factory() as session:
        alpha = Org(name="Alpha", description="Alpha squadron")
        beta = Org(name="Beta", description="Beta squadron")
        session.add_all([alpha, beta])
        session.add_all(
            [
                User(edipi=ADMIN, first_name="Ada", last_name="Admin", is_registered=True),
                User(edipi=MANAGER, first_name="Max", last_name="Manager", is_registered=True),
                User(edipi=VIEWER, first_name="Vic", last_name="Viewer", is_registered=True),
                User(edipi=REQUESTER, first_name="Rae", last_name="Requester", is_registered=True),
                User(edipi=UNREGISTERED, first_name="Una", last_name="Unregistered"),
                User(edipi=OUTSIDER, first_name="Oz", last_name="Outsider", is_registered=True),
            ]
        )
        await session.flush()

        pii_workspace = Workspace(org_id=alpha.id, name="PII analytics", pii=True)
        phi_workspace = Workspace(org_id=alpha.id, name="Medical analytics", pii=True, phi=True)
        session.add_all([pii_workspace, phi_workspace])
        session.add_all(
            [
                CustomRosterColumn(
                    org_id=alpha.id, name="diagnosis", display_name="Diagnosis", phi=True
                ),
                CustomRosterColumn(org_id=alpha.id, name="unitCode", display_name="Unit Code"),
            ]
        )

        admin_role = Role(
            org_id=alpha.id,
            name="Admin",
            description="Everything",
            allowed_roster_columns={**ALL_BASE_COLUMNS, "diagnosis": True, "unitCode": True},
            allowed_notification_events={"access-request": True, "roster-change": True},
            can_manage_group=True,
            can_manage_roster=True,
            can_manage_workspace=True,
            can_view_roster=True,
            can_view_muster=True,
            can_view_pii=True,
            can_view_phi=True,
        )
        manager_role = Role(
            org_id=alpha.id,
            name="Manager",
            description="Manages the group without PHI",
            allowed_roster_columns=dict(ALL_BASE_COLUMNS),
            allowed_notification_events={"access-request": True},
            can_manage_group=True,
            can_manage_roster=True,
            can_manage_workspace=True,
            can_view_roster=True,
            can_view_muster=True,
            can_view_pii=True,
        )
        viewer_role = Role(
            org_id=alpha.id,
            name="Viewer",
            description="Reads the roster",
            default_index_prefix="alpha-view",
            allowed_roster_columns={"edipi": True, "startDate": True, "endDate": True},
            can_view_roster=True,
        )
        roster_manager_role = Role(
            org_id=alpha.id,
            name="Roster manager",
            description="Edits the roster",
            allowed_roster_columns={"startDate": True},
            can_manage_roster=True,
            can_view_roster=True,
        )
        phi_role = Role(
            org_id=alpha.id,
            name="Medical",
            description="Sees PHI",
            allowed_roster_columns={"diagnosis": True},
            can_view_roster=True,
            can_view_pii=True,
            can_view_phi=True,
        )
        beta_role = Role(
            org_id=beta.id,
            name="Beta viewer",
            description="Reads Beta",
            can_view_roster=True,
        )
        session.add_all(
            [admin_role, manager_role, viewer_role, roster_manager_role, phi_role, beta_role]
        )
        await session.flush()

        session.add_all(
            [
                UserRole(user_edipi=ADMIN, org_id=alpha.id, role_id=admin_role.id),
                UserRole(user_edipi=MANAGER, org_id=alpha.id, role_id=manager_role.id),
                UserRole(
                    user_edipi=VIEWER,
                    org_id=alpha.id,
                    role_id=viewer_role.id,
                    index_prefix="alpha-view",
                ),
                UserRole(user_edipi=OUTSIDER, org_id=beta.id, role_id=beta_role.id),
            ]
        )
        await session.commit()

        return SimpleNamespace(
            alpha_id=alpha.id,
            beta_id=beta.id,
            pii_workspace_id=pii_workspace.id,
            phi_workspace_id=phi_workspace.id,
            admin_role_id=admin_role.id,
            manager_role_id=manager_role.id,
            viewer_role_id=viewer_role.id,
            roster_manager_role_id=roster_manager_role.id,
            phi_role_id=phi_role.id,
            beta_role_id=beta_role.id,
        )


@pytest.fixture
def actor_for():
    """Build the OrgActor an authenticated route would resolve."""

    async def _actor_for(uow, edipi: str, org_id: int) -> OrgActor:
        user = await uow.users.get(edipi)
        org = await uow.orgs.get(org_id)
        return OrgActor(user=user, org=org, user_role=user.role_in_org(org_id))

    return _actor_for


@pytest.fixture
def auth_headers():
    def _auth_headers(edipi: str) -> dict[str, str]:
        token, _ = create_jwt(edipi)
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers


@pytest.fixture
async def client(session_factory):
    async def _override_uow():
        async with unit_of_work(session_factory) as uow:
            yield uow

    app.dependency_overrides[get_uow] = _override_uow
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
