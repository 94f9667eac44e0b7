"""Analytics workspace model. Roles bound to a workspace inherit its PII/PHI access."""

from sqlmodel import Field, SQLModel

from .base import IdMixin, TimestampMixin


class Workspace(IdMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "workspaces"

    org_id: int = Field(foreign_key="orgs.id", nullable=False, index=True)
    name: str = Field(nullable=False, max_length=200)
    description: str = Field(default="", nullable=False)
    pii: bool = Field(default=False, nullable=False)
    phi: bool = Field(default=False, nullable=False)
