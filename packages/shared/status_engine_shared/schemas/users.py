"""User and membership schemas."""

from __future__ import annotations

from typing import List, Optional

from .common import CamelModel
from .organizations import OrgSummary
from .roles import RoleResponse


class UserSummary(CamelModel):
    edipi: str
    first_name: str = ""
    last_name: str = ""
    email: Optional[str] = None
    phone: Optional[str] = None
    is_registered: bool = False


class UserRoleResponse(CamelModel):
    """One membership of the current user."""
    id: int
    org: OrgSummary
    role: RoleResponse
    index_prefix: str = ""


class UserResponse(UserSummary):
    """The current user with all memberships."""
    user_roles: List[UserRoleResponse] = []


class OrgMemberResponse(CamelModel):
    """A member of an org as seen by its managers."""
    user: UserSummary
    role: RoleResponse
    index_prefix: str = ""


class ChangeRoleRequest(CamelModel):
    role_id: Optional[int] = None
