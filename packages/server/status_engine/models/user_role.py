"""User-Role membership. A user holds at most one role per org."""

from typing import TYPE_CHECKING, Optional

import sqlalchemy as sa
from sqlmodel import Field, Relationship, SQLModel

from .base import IdMixin

if TYPE_CHECKING:
    from .org import Org
    from .role import Role
    from .user import User


class UserRole(IdMixin, SQLModel, table=True):
    __tablename__ = "user_roles"
    __table_args__ = (
        sa.UniqueConstraint("user_edipi", "org_id", name="uq_user_roles_user_org"),
    )

    user_edipi: str = Field(foreign_key="users.edipi", nullable=False, index=True)
    org_id: int = Field(foreign_key="orgs.id", nullable=False, index=True)
    role_id: int = Field(foreign_key="roles.id", nullable=False, index=True)
    index_prefix: str = Field(default="", nullable=False)

    user: Optional["User"] = Relationship(back_populates="user_roles")
    org: Optional["Org"] = Relationship()
    role: Optional["Role"] = Relationship()
