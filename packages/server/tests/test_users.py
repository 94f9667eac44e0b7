"""
Tests for memberships: the current-user profile, member listing, role
replacement, removal, and the local admin bootstrap script.
"""

from __future__ import annotations

import pytest

from conftest import ADMIN, MANAGER, REQUESTER, VIEWER
from status_engine.core.database import unit_of_work
from status_engine.core.errors import BadRequestError, NotFoundError, UnauthorizedError
from status_engine.scripts.create_local_admin import bootstrap_admin
from status_engine.services import users as user_service
from status_engine_shared.schemas.common import CAPABILITY_FLAGS


class TestCurrentUser:
    async def test_profile_lists_memberships(self, client, auth_headers, world):
        response = await client.get("/api/v1/users/current", headers=auth_headers(VIEWER))
        assert response.status_code == 200
        body = response.json()
        assert body["edipi"] == VIEWER
        assert body["isRegistered"] is True
        [membership] = body["userRoles"]
        assert membership["org"]["name"] == "Alpha"
        assert membership["role"]["name"] == "Viewer"
        assert membership["indexPrefix"] == "alpha-view"

    async def test_user_without_memberships(self, client, auth_headers, world):
        response = await client.get("/api/v1/users/current", headers=auth_headers(REQUESTER))
        assert response.json()["userRoles"] == []

    async def test_unknown_subject_is_unauthorized(self, client, auth_headers, world):
        response = await client.get("/api/v1/users/current", headers=auth_headers("9999999999"))
        assert response.status_code == 401


class TestChangeRole:
    async def test_change_to_narrower_role(self, session_factory, actor_for, world):
        async with unit_of_work(session_factory) as uow:
            actor = await actor_for(uow, ADMIN, world.alpha_id)
            info = await user_service.change_member_role(
                uow, actor, VIEWER, world.roster_manager_role_id
            )
            assert info["role"].id == world.roster_manager_role_id

        async with unit_of_work(session_factory) as uow:
            user = await uow.users.get(VIEWER)
            assert user.role_in_org(world.alpha_id).role_id == world.roster_manager_role_id

    async def test_broader_role_is_unauthorized(self, session_factory, actor_for, world):
        with pytest.raises(UnauthorizedError):
            async with unit_of_work(session_factory) as uow:
                actor = await actor_for(uow, MANAGER, world.alpha_id)
                await user_service.change_member_role(uow, actor, VIEWER, world.admin_role_id)

        async with unit_of_work(session_factory) as uow:
            user = await uow.users.get(VIEWER)
            assert user.role_in_org(world.alpha_id).role_id == world.viewer_role_id

    async def test_missing_role_id(self, session_factory, actor_for, world):
        with pytest.raises(BadRequestError):
            async with unit_of_work(session_factory) as uow:
                actor = await actor_for(uow, ADMIN, world.alpha_id)
                await user_service.change_member_role(uow, actor, VIEWER, None)

    async def test_non_member_is_not_found(self, session_factory, actor_for, world):
        with pytest.raises(NotFoundError):
            async with unit_of_work(session_factory) as uow:
                actor = await actor_for(uow, ADMIN, world.alpha_id)
                await user_service.change_member_role(
                    uow, actor, REQUESTER, world.viewer_role_id
                )

    async def test_change_via_api(self, client, auth_headers, world):
        response = await client.put(
            f"/api/v1/orgs/{world.alpha_id}/users/{VIEWER}/role",
            json={"roleId": world.roster_manager_role_id},
            headers=auth_headers(ADMIN),
        )
        assert response.status_code == 200, response.text
        body = response.json()
        assert body["user"]["edipi"] == VIEWER
        assert body["role"]["id"] == world.roster_manager_role_id


class TestMembers:
    async def test_list_members(self, client, auth_headers, world):
        response = await client.get(
            f"/api/v1/orgs/{world.alpha_id}/users", headers=auth_headers(ADMIN)
        )
        assert response.status_code == 200
        members = {item["user"]["edipi"]: item["role"]["name"] for item in response.json()}
        assert members == {ADMIN: "Admin", MANAGER: "Manager", VIEWER: "Viewer"}

    async def test_remove_member_revokes_access(self, client, auth_headers, world):
        response = await client.delete(
            f"/api/v1/orgs/{world.alpha_id}/users/{VIEWER}", headers=auth_headers(ADMIN)
        )
        assert response.status_code == 204

        response = await client.get(
            f"/api/v1/orgs/{world.alpha_id}/roles", headers=auth_headers(VIEWER)
        )
        assert response.status_code == 403

    async def test_remove_non_member(self, client, auth_headers, world):
        response = await client.delete(
            f"/api/v1/orgs/{world.alpha_id}/users/{REQUESTER}", headers=auth_headers(ADMIN)
        )
        assert response.status_code == 404


class TestBootstrapAdmin:
    async def test_reuses_existing_org_by_name(self, session_factory, world):
        async with unit_of_work(session_factory) as uow:
            org, user, role = await bootstrap_admin(uow, "5555555555", "Alpha")
            assert org.id == world.alpha_id
            assert role.org_id == world.alpha_id

        async with unit_of_work(session_factory) as uow:
            assert (await uow.orgs.find_by_name("Alpha")).id == world.alpha_id
            user = await uow.users.get("5555555555")
            assert user.is_registered
            assert user.role_in_org(world.alpha_id) is not None

    async def test_creates_org_user_and_admin_role(self, session_factory):
        async with unit_of_work(session_factory) as uow:
            org, user, role = await bootstrap_admin(uow, "5555555555", "Local Org")
            org_id, role_id = org.id, role.id
            assert user.is_registered
            assert all(getattr(role, flag) for flag in CAPABILITY_FLAGS)
            assert role.allowed_roster_columns["edipi"] is True

        async with unit_of_work(session_factory) as uow:
            user = await uow.users.get("5555555555")
            assert user.role_in_org(org_id).role_id == role_id

    async def test_is_idempotent(self, session_factory):
        async with unit_of_work(session_factory) as uow:
            org, _, role = await bootstrap_admin(uow, "5555555555", "Local Org")
        async with unit_of_work(session_factory) as uow:
            org_again, _, role_again = await bootstrap_admin(uow, "5555555555", "Local Org")
        assert org_again.id == org.id
        assert role_again.id == role.id
