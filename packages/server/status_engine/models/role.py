"""Role model: an org-scoped bundle of capability flags and visibility grants."""

from typing import TYPE_CHECKING, Optional

from sqlmodel import Field, Relationship, SQLModel

from status_engine.core.permissions import PermissionSet
from status_engine_shared.schemas.common import CAPABILITY_FLAGS

from .base import IdMixin, JSONType, TimestampMixin

if TYPE_CHECKING:
    from .org import Org
    from .workspace import Workspace


class Role(IdMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "roles"

    org_id: int = Field(foreign_key="orgs.id", nullable=False, index=True)
    name: str = Field(nullable=False, max_length=100)
    description: str = Field(default="", nullable=False)
    default_index_prefix: str = Field(default="", nullable=False)
    workspace_id: Optional[int] = Field(default=None, foreign_key="workspaces.id")

    allowed_roster_columns: dict = Field(default_factory=dict, sa_type=JSONType, nullable=False)
    allowed_notification_events: dict = Field(
        default_factory=dict, sa_type=JSONType, nullable=False
    )

    can_manage_group: bool = Field(default=False, nullable=False)
    can_manage_roster: bool = Field(default=False, nullable=False)
    can_manage_workspace: bool = Field(default=False, nullable=False)
    can_view_roster: bool = Field(default=False, nullable=False)
    can_view_muster: bool = Field(default=False, nullable=False)
    can_view_pii: bool = Field(default=False, nullable=False)
    can_view_phi: bool = Field(default=False, nullable=False)

    org: Optional["Org"] = Relationship()
    workspace: Optional["Workspace"] = Relationship()

    @property
    def roster_column_permissions(self) -> PermissionSet:
        return PermissionSet(self.allowed_roster_columns)

    @property
    def notification_permissions(self) -> PermissionSet:
        return PermissionSet(self.allowed_notification_events)

    def capabilities(self) -> dict[str, bool]:
        return {flag: bool(getattr(self, flag)) for flag in CAPABILITY_FLAGS}

    def is_superset_of(self, other: "Role") -> bool:
        """True if this role holds every permission ``other`` holds.

        Used to stop an approver from granting a role broader than their own.
        """
        mine = self.capabilities()
        for flag, granted in other.capabilities().items():
            if granted and not mine[flag]:
                return False
        return self.roster_column_permissions.issuperset(
            other.roster_column_permissions
        ) and self.notification_permissions.issuperset(other.notification_permissions)
