"""
Roster column catalog schemas.

Base columns are fixed for every org; orgs may add custom columns on top.
Each column is classified as PII and/or PHI, which gates which roles may
see it.
"""

from __future__ import annotations

from enum import Enum

from .common import CamelModel


class RosterColumnType(str, Enum):
    STRING = "string"
    BOOLEAN = "boolean"
    DATE = "date"
    DATETIME = "datetime"
    NUMBER = "number"


class RosterColumnInfo(CamelModel):
    name: str
    display_name: str
    type: RosterColumnType
    pii: bool = False
    phi: bool = False
    custom: bool = False
    required: bool = False
    updatable: bool = True


class RosterColumnListResponse(CamelModel):
    data: list[RosterColumnInfo]


BASE_ROSTER_COLUMNS: tuple[RosterColumnInfo, ...] = (
    RosterColumnInfo(
        name="edipi",
        display_name="EDIPI",
        type=RosterColumnType.STRING,
        pii=True,
        required=True,
        updatable=False,
    ),
    RosterColumnInfo(
        name="firstName",
        display_name="First Name",
        type=RosterColumnType.STRING,
        pii=True,
        required=True,
    ),
    RosterColumnInfo(
        name="lastName",
        display_name="Last Name",
        type=RosterColumnType.STRING,
        pii=True,
        required=True,
    ),
    RosterColumnInfo(name="startDate", display_name="Start Date", type=RosterColumnType.DATE),
    RosterColumnInfo(name="endDate", display_name="End Date", type=RosterColumnType.DATE),
    RosterColumnInfo(
        name="lastReported",
        display_name="Last Reported",
        type=RosterColumnType.DATETIME,
    ),
)
