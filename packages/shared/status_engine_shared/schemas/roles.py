"""
Role schemas.

Permission maps travel either as ``{"name": true, ...}`` or as a list of
allowed names; both are normalized to a mapping on input.
"""

from __future__ import annotations

from typing import Optional, Union

from pydantic import Field, field_validator

from .common import CamelModel


def _normalize_permissions(value: Union[dict, list, tuple, None]):
    """Turn a list of names into a grant mapping; mappings are left to field validation."""
    if value is None:
        return {}
    if isinstance(value, str):
        raise ValueError("expected a mapping of name to boolean or a list of names")
    if isinstance(value, (list, tuple)):
        return {str(name): True for name in value}
    return value


class RoleRequest(CamelModel):
    """Create or replace a role. Implied flags are filled in by the server."""

    name: str = Field(default="", max_length=100)
    description: str = ""
    default_index_prefix: str = ""
    workspace_id: Optional[int] = None
    allowed_roster_columns: dict[str, bool] = Field(default_factory=dict)
    allowed_notification_events: dict[str, bool] = Field(default_factory=dict)
    can_manage_group: bool = False
    can_manage_roster: bool = False
    can_manage_workspace: bool = False
    can_view_roster: bool = False
    can_view_muster: bool = False
    can_view_pii: bool = False
    can_view_phi: bool = False

    @field_validator("allowed_roster_columns", "allowed_notification_events", mode="before")
    @classmethod
    def _permissions(cls, value):
        return _normalize_permissions(value)


class RoleResponse(CamelModel):
    id: int
    org_id: int
    name: str
    description: str
    default_index_prefix: str
    workspace_id: Optional[int] = None
    allowed_roster_columns: dict[str, bool]
    allowed_notification_events: dict[str, bool]
    can_manage_group: bool
    can_manage_roster: bool
    can_manage_workspace: bool
    can_view_roster: bool
    can_view_muster: bool
    can_view_pii: bool
    can_view_phi: bool
