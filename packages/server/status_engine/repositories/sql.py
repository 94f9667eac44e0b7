"""
SQLModel/AsyncSession implementations of the persistence ports.

All relationships needed by callers are eager-loaded (selectinload): lazy
loads are not available under asyncio.
"""

from __future__ import annotations

from typing import Optional, Sequence

import structlog
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlmodel import select

from status_engine.models import (
    AccessRequest,
    CustomRosterColumn,
    Org,
    Role,
    User,
    UserRole,
    Workspace,
)
from status_engine_shared.schemas.common import AccessRequestStatus

from .base import DuplicateMembershipError

log = structlog.get_logger()


class SqlOrgRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, org_id: int) -> Optional[Org]:
        result = await self.session.execute(
            select(Org).where(Org.id == org_id).options(selectinload(Org.contact))
        )
        return result.scalar_one_or_none()

    async def find_by_name(self, name: str) -> Optional[Org]:
        result = await self.session.execute(
            select(Org).where(Org.name == name).order_by(Org.id)
        )
        return result.scalars().first()

    async def add(self, org: Org) -> Org:
        self.session.add(org)
        await self.session.flush()
        return org


class SqlUserRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, edipi: str) -> Optional[User]:
        # populate_existing: memberships must reflect the database, not a
        # copy loaded earlier in the same session.
        result = await self.session.execute(
            select(User)
            .where(User.edipi == edipi)
            .options(
                selectinload(User.user_roles).selectinload(UserRole.role),
                selectinload(User.user_roles).selectinload(UserRole.org),
            )
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def add(self, user: User) -> User:
        self.session.add(user)
        await self.session.flush()
        return user

    async def add_role(self, user: User, role: Role) -> UserRole:
        user_role = UserRole(
            user_edipi=user.edipi,
            org_id=role.org_id,
            role_id=role.id,
            index_prefix=role.default_index_prefix,
        )
        user_role.role = role
        user.user_roles.append(user_role)
        self.session.add(user_role)
        await self._flush_membership(user.edipi, role.org_id)
        return user_role

    async def replace_role(self, user_role: UserRole, role: Role) -> UserRole:
        user_role.role_id = role.id
        user_role.role = role
        user_role.index_prefix = role.default_index_prefix
        self.session.add(user_role)
        await self.session.flush()
        return user_role

    async def list_org_members(self, org_id: int) -> Sequence[UserRole]:
        result = await self.session.execute(
            select(UserRole)
            .where(UserRole.org_id == org_id)
            .options(selectinload(UserRole.user), selectinload(UserRole.role))
            .order_by(UserRole.user_edipi)
        )
        return result.scalars().all()

    async def remove_role(self, user_role: UserRole) -> None:
        await self.session.delete(user_role)
        await self.session.flush()

    async def _flush_membership(self, edipi: str, org_id: int) -> None:
        try:
            await self.session.flush()
        except IntegrityError as exc:
            log.warning("user_role.duplicate", edipi=edipi, org_id=org_id)
            raise DuplicateMembershipError(f"{edipi} already has a role in org {org_id}") from exc


class SqlRoleRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, org_id: int, role_id: int) -> Optional[Role]:
        result = await self.session.execute(
            select(Role)
            .where(Role.id == role_id, Role.org_id == org_id)
            .options(selectinload(Role.workspace), selectinload(Role.org))
        )
        return result.scalar_one_or_none()

    async def list_for_org(self, org_id: int) -> Sequence[Role]:
        result = await self.session.execute(
            select(Role)
            .where(Role.org_id == org_id)
            .options(selectinload(Role.workspace))
            .order_by(Role.id)
        )
        return result.scalars().all()

    async def add(self, role: Role) -> Role:
        self.session.add(role)
        await self.session.flush()
        return role

    async def delete(self, role: Role) -> None:
        await self.session.delete(role)
        await self.session.flush()

    async def count_holders(self, role_id: int) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(UserRole).where(UserRole.role_id == role_id)
        )
        return result.scalar_one()


class SqlAccessRequestRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    def _query(self):
        return select(AccessRequest).options(
            selectinload(AccessRequest.user), selectinload(AccessRequest.org)
        )

    async def get(self, org_id: int, request_id: int) -> Optional[AccessRequest]:
        result = await self.session.execute(
            self._query().where(
                AccessRequest.id == request_id, AccessRequest.org_id == org_id
            )
        )
        return result.scalar_one_or_none()

    async def find_for_user(self, org_id: int, edipi: str) -> Optional[AccessRequest]:
        result = await self.session.execute(
            self._query().where(
                AccessRequest.user_edipi == edipi, AccessRequest.org_id == org_id
            )
        )
        return result.scalars().first()

    async def list_pending(self, org_id: int) -> Sequence[AccessRequest]:
        result = await self.session.execute(
            self._query()
            .where(
                AccessRequest.org_id == org_id,
                AccessRequest.status == AccessRequestStatus.PENDING.value,
            )
            .order_by(AccessRequest.request_date, AccessRequest.id)
        )
        return result.scalars().all()

    async def add(self, request: AccessRequest) -> AccessRequest:
        self.session.add(request)
        await self.session.flush()
        return request

    async def delete(self, request: AccessRequest) -> None:
        await self.session.delete(request)
        await self.session.flush()


class SqlWorkspaceRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, org_id: int, workspace_id: int) -> Optional[Workspace]:
        result = await self.session.execute(
            select(Workspace).where(Workspace.id == workspace_id, Workspace.org_id == org_id)
        )
        return result.scalar_one_or_none()


class SqlRosterColumnRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_custom(self, org_id: int) -> Sequence[CustomRosterColumn]:
        result = await self.session.execute(
            select(CustomRosterColumn)
            .where(CustomRosterColumn.org_id == org_id)
            .order_by(CustomRosterColumn.id)
        )
        return result.scalars().all()


class SqlUnitOfWork:
    """Unit of work bound to one AsyncSession (one transaction)."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.orgs = SqlOrgRepository(session)
        self.users = SqlUserRepository(session)
        self.roles = SqlRoleRepository(session)
        self.access_requests = SqlAccessRequestRepository(session)
        self.workspaces = SqlWorkspaceRepository(session)
        self.roster_columns = SqlRosterColumnRepository(session)

    async def flush(self) -> None:
        await self.session.flush()

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()
