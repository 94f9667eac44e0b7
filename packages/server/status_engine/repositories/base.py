"""
Persistence ports used by the service layer.

Services receive a ``UnitOfWork`` explicitly and only talk to these narrow
interfaces; the SQLModel implementation lives in ``repositories.sql``.
"""

from __future__ import annotations

from typing import Optional, Protocol, Sequence

from status_engine.models import (
    AccessRequest,
    CustomRosterColumn,
    Org,
    Role,
    User,
    UserRole,
    Workspace,
)


class DuplicateMembershipError(Exception):
    """A second role for the same (user, org) was rejected by the store."""


class OrgRepository(Protocol):
    async def get(self, org_id: int) -> Optional[Org]: ...

    async def find_by_name(self, name: str) -> Optional[Org]: ...

    async def add(self, org: Org) -> Org: ...


class UserRepository(Protocol):
    async def get(self, edipi: str) -> Optional[User]:
        """Load a user with memberships (role and org joined)."""
        ...

    async def add(self, user: User) -> User: ...

    async def add_role(self, user: User, role: Role) -> UserRole:
        """Attach ``role`` to ``user``. Raises DuplicateMembershipError on conflict."""
        ...

    async def replace_role(self, user_role: UserRole, role: Role) -> UserRole: ...

    async def list_org_members(self, org_id: int) -> Sequence[UserRole]: ...

    async def remove_role(self, user_role: UserRole) -> None: ...


class RoleRepository(Protocol):
    async def get(self, org_id: int, role_id: int) -> Optional[Role]: ...

    async def list_for_org(self, org_id: int) -> Sequence[Role]: ...

    async def add(self, role: Role) -> Role: ...

    async def delete(self, role: Role) -> None: ...

    async def count_holders(self, role_id: int) -> int: ...


class AccessRequestRepository(Protocol):
    async def get(self, org_id: int, request_id: int) -> Optional[AccessRequest]: ...

    async def find_for_user(self, org_id: int, edipi: str) -> Optional[AccessRequest]: ...

    async def list_pending(self, org_id: int) -> Sequence[AccessRequest]: ...

    async def add(self, request: AccessRequest) -> AccessRequest: ...

    async def delete(self, request: AccessRequest) -> None: ...


class WorkspaceRepository(Protocol):
    async def get(self, org_id: int, workspace_id: int) -> Optional[Workspace]: ...


class RosterColumnRepository(Protocol):
    async def list_custom(self, org_id: int) -> Sequence[CustomRosterColumn]: ...


class UnitOfWork(Protocol):
    """One transaction. Committed or rolled back by whoever opened it."""

    orgs: OrgRepository
    users: UserRepository
    roles: RoleRepository
    access_requests: AccessRequestRepository
    workspaces: WorkspaceRepository
    roster_columns: RosterColumnRepository

    async def flush(self) -> None: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...
