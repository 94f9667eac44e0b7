"""Org-defined custom roster columns (base columns are constants)."""

from sqlmodel import Field, SQLModel

from status_engine_shared.schemas.roster import RosterColumnInfo, RosterColumnType

from .base import IdMixin


class CustomRosterColumn(IdMixin, SQLModel, table=True):
    __tablename__ = "custom_roster_columns"

    org_id: int = Field(foreign_key="orgs.id", nullable=False, index=True)
    name: str = Field(nullable=False, max_length=100)
    display_name: str = Field(nullable=False, max_length=100)
    type: str = Field(default=RosterColumnType.STRING.value, nullable=False)
    pii: bool = Field(default=False, nullable=False)
    phi: bool = Field(default=False, nullable=False)
    required: bool = Field(default=False, nullable=False)
    updatable: bool = Field(default=True, nullable=False)

    def to_info(self) -> RosterColumnInfo:
        return RosterColumnInfo(
            name=self.name,
            display_name=self.display_name,
            type=RosterColumnType(self.type),
            pii=self.pii,
            phi=self.phi,
            custom=True,
            required=self.required,
            updatable=self.updatable,
        )
