"""
Roster column catalog and per-role column visibility.
"""

from __future__ import annotations

from conftest import ADMIN, REQUESTER, VIEWER
from status_engine.models import Role
from status_engine.services.roster import visible_columns
from status_engine_shared.schemas.roster import BASE_ROSTER_COLUMNS


class TestVisibleColumns:
    def test_grant_without_pii_flag_is_hidden(self):
        role = Role(
            org_id=1,
            name="r",
            allowed_roster_columns={"edipi": True, "startDate": True},
            can_view_roster=True,
        )
        names = [column.name for column in visible_columns(role, BASE_ROSTER_COLUMNS)]
        assert names == ["startDate"]

    def test_ungranted_columns_are_hidden(self):
        role = Role(org_id=1, name="r", can_view_pii=True)
        assert visible_columns(role, BASE_ROSTER_COLUMNS) == []


class TestRosterApi:
    async def test_catalog_includes_custom_columns(self, client, auth_headers, world):
        response = await client.get(
            f"/api/v1/orgs/{world.alpha_id}/roster/columns", headers=auth_headers(VIEWER)
        )
        assert response.status_code == 200
        columns = {column["name"]: column for column in response.json()["data"]}
        assert columns["edipi"]["pii"] is True
        assert columns["edipi"]["custom"] is False
        assert columns["diagnosis"]["phi"] is True
        assert columns["diagnosis"]["custom"] is True
        assert columns["unitCode"]["displayName"] == "Unit Code"

    async def test_allowed_columns_for_viewer(self, client, auth_headers, world):
        response = await client.get(
            f"/api/v1/orgs/{world.alpha_id}/roster/allowed-columns",
            headers=auth_headers(VIEWER),
        )
        assert response.status_code == 200
        assert [column["name"] for column in response.json()["data"]] == [
            "startDate",
            "endDate",
        ]

    async def test_allowed_columns_for_admin(self, client, auth_headers, world):
        response = await client.get(
            f"/api/v1/orgs/{world.alpha_id}/roster/allowed-columns",
            headers=auth_headers(ADMIN),
        )
        names = {column["name"] for column in response.json()["data"]}
        assert {"edipi", "diagnosis", "unitCode"} <= names

    async def test_non_member_is_forbidden(self, client, auth_headers, world):
        response = await client.get(
            f"/api/v1/orgs/{world.alpha_id}/roster/columns", headers=auth_headers(REQUESTER)
        )
        assert response.status_code == 403
