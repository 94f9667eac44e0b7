"""User model. Users are keyed by their external EDIPI."""

from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

import sqlalchemy as sa
from sqlmodel import Field, Relationship, SQLModel

from .base import _utcnow

if TYPE_CHECKING:
    from .user_role import UserRole


class User(SQLModel, table=True):
    __tablename__ = "users"

    edipi: str = Field(primary_key=True, max_length=10)
    first_name: str = Field(default="", nullable=False, max_length=100)
    last_name: str = Field(default="", nullable=False, max_length=100)
    email: Optional[str] = Field(default=None, index=True)
    phone: Optional[str] = None
    is_registered: bool = Field(default=False, nullable=False)
    created_at: datetime = Field(
        default_factory=_utcnow,
        nullable=False,
        sa_column_kwargs={"server_default": sa.func.now()},
        sa_type=sa.DateTime(timezone=True),
    )

    user_roles: List["UserRole"] = Relationship(back_populates="user")

    def role_in_org(self, org_id: int) -> Optional["UserRole"]:
        """The user's membership in ``org_id``, if any. Requires ``user_roles`` loaded."""
        for user_role in self.user_roles:
            if user_role.org_id == org_id:
                return user_role
        return None
