"""
Role permission primitives.

Roles carry two dynamically keyed permission maps (roster columns and
notification events). ``PermissionSet`` gives them a total lookup: a key that
was never granted reads as ``False``. The helpers below implement the
derivation hierarchy every role writer must apply:

- manage-group implies manage-roster, manage-workspace, view-roster, view-muster
- manage-roster implies view-roster
- view-PHI implies view-PII
- a PII column needs view-PII (or view-PHI); a PHI column needs view-PHI
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Union

from status_engine_shared.schemas.common import CAPABILITY_FLAGS
from status_engine_shared.schemas.roster import RosterColumnInfo

PermissionInput = Union[Mapping[str, bool], Iterable[str], None]

MANAGE_GROUP_IMPLIES = (
    "can_manage_roster",
    "can_manage_workspace",
    "can_view_roster",
    "can_view_muster",
)


class PermissionSet(Mapping[str, bool]):
    """Immutable identifier -> allowed mapping; absent keys are not allowed.

    Accepts either a mapping of booleans or an iterable of allowed names.
    """

    __slots__ = ("_grants",)

    def __init__(self, grants: PermissionInput = None):
        if grants is None:
            self._grants: dict[str, bool] = {}
        elif isinstance(grants, Mapping):
            self._grants = {str(key): bool(value) for key, value in grants.items()}
        else:
            self._grants = {str(key): True for key in grants}

    def __getitem__(self, key: str) -> bool:
        return self._grants.get(key, False)

    def __contains__(self, key: object) -> bool:
        return key in self._grants

    def __iter__(self) -> Iterator[str]:
        return iter(self._grants)

    def __len__(self) -> int:
        return len(self._grants)

    def __repr__(self) -> str:
        return f"PermissionSet({sorted(self.allowed())!r})"

    def allowed(self) -> frozenset[str]:
        return frozenset(key for key, value in self._grants.items() if value)

    def issuperset(self, other: "PermissionSet") -> bool:
        return self.allowed() >= other.allowed()

    def to_dict(self) -> dict[str, bool]:
        return dict(self._grants)


def apply_capability_hierarchy(flags: Mapping[str, bool]) -> dict[str, bool]:
    """Return every capability flag with the implied flags switched on."""
    result = {name: bool(flags.get(name, False)) for name in CAPABILITY_FLAGS}
    if result["can_manage_group"]:
        for implied in MANAGE_GROUP_IMPLIES:
            result[implied] = True
    if result["can_manage_roster"]:
        result["can_view_roster"] = True
    if result["can_view_phi"]:
        result["can_view_pii"] = True
    return result


def column_allowed(column: RosterColumnInfo, can_view_pii: bool, can_view_phi: bool) -> bool:
    return (not column.pii or can_view_pii or can_view_phi) and (not column.phi or can_view_phi)


def filter_roster_columns(
    requested: PermissionSet,
    columns: Iterable[RosterColumnInfo],
    can_view_pii: bool,
    can_view_phi: bool,
) -> dict[str, bool]:
    """Gate explicit column grants by PII/PHI visibility.

    Only catalog columns are kept; a grant on a column the flags do not
    cover is turned off.
    """
    return {
        column.name: requested[column.name] and column_allowed(column, can_view_pii, can_view_phi)
        for column in columns
    }


def workspace_roster_columns(
    columns: Iterable[RosterColumnInfo], pii: bool, phi: bool
) -> dict[str, bool]:
    """Column grants for a role bound to a workspace: everything the workspace may see."""
    return {column.name: column_allowed(column, pii, phi) for column in columns}
