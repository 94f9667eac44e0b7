"""Organization (tenant) model."""

from typing import TYPE_CHECKING, Optional

from sqlmodel import Field, Relationship, SQLModel

from .base import IdMixin, TimestampMixin

if TYPE_CHECKING:
    from .user import User


class Org(IdMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "orgs"

    name: str = Field(nullable=False, index=True, max_length=200)
    description: str = Field(default="", nullable=False)
    contact_edipi: Optional[str] = Field(default=None, foreign_key="users.edipi")

    contact: Optional["User"] = Relationship()
