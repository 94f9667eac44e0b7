"""
Caller identity and org-scoped authorization for Status Engine.

Supports:
- Signed session JWTs whose subject is the caller's EDIPI, read from the
  ``Authorization: Bearer`` header or the session cookie
- Org resolution from the ``orgId`` path parameter
- The caller's active role in that org, and a manage-group guard
"""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
import structlog
from fastapi import Depends, Request

from status_engine.core.config import get_settings
from status_engine.core.database import get_uow
from status_engine.core.errors import (
    BadRequestError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
)
from status_engine.models import Org, Role, User, UserRole
from status_engine.repositories.base import UnitOfWork

log = structlog.get_logger()
settings = get_settings()


# ---------------------------------------------------------------------------
# JWT
# ---------------------------------------------------------------------------

def create_jwt(edipi: str, *, expires_delta: timedelta | None = None) -> tuple[str, str]:
    """Create a signed session JWT. Returns (token, jti)."""
    jti = str(uuid.uuid4())
    now = datetime.now(timezone.utc)
    exp = now + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    payload = {
        "sub": edipi,
        "iat": now,
        "exp": exp,
        "jti": jti,
    }
    token = jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)
    return token, jti


def decode_jwt(token: str) -> dict:
    """Decode and verify a JWT. Raises jwt.PyJWTError on failure."""
    return jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])


# ---------------------------------------------------------------------------
# Request parsing
# ---------------------------------------------------------------------------

def parse_org_id(raw: str) -> int:
    """Org ids arrive as path strings; anything but a non-negative integer is a 400."""
    try:
        org_id = int(raw)
    except (TypeError, ValueError):
        raise BadRequestError(f"Invalid organization id: {raw}")
    if org_id < 0:
        raise BadRequestError(f"Invalid organization id: {raw}")
    return org_id


def _session_token(request: Request) -> Optional[str]:
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header[7:].strip() or None
    return request.cookies.get(settings.session_cookie_name)


# ---------------------------------------------------------------------------
# Authentication dependencies
# ---------------------------------------------------------------------------

class OrgActor:
    """An authenticated user acting within one org, with their role there (if any)."""

    def __init__(self, user: User, org: Org, user_role: Optional[UserRole]):
        self.user = user
        self.org = org
        self.user_role = user_role
        self.edipi = user.edipi
        self.org_id = org.id

    @property
    def role(self) -> Optional[Role]:
        return self.user_role.role if self.user_role else None


async def get_current_user(
    request: Request,
    uow: UnitOfWork = Depends(get_uow),
) -> User:
    """Resolve the caller from their session token."""
    token = _session_token(request)
    if not token:
        raise UnauthorizedError("Authentication required")

    try:
        payload = decode_jwt(token)
    except jwt.PyJWTError:
        raise UnauthorizedError("Invalid or expired session")

    edipi = payload.get("sub")
    if not edipi:
        raise UnauthorizedError("Invalid or expired session")

    user = await uow.users.get(edipi)
    if not user:
        raise UnauthorizedError("User not found")

    structlog.contextvars.bind_contextvars(edipi=user.edipi)
    return user


async def get_org_actor(
    orgId: str,
    user: User = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_uow),
) -> OrgActor:
    """Resolve the org in the path and the caller's membership in it."""
    org_id = parse_org_id(orgId)
    org = await uow.orgs.get(org_id)
    if not org:
        raise NotFoundError("Organization was not found")
    return OrgActor(user=user, org=org, user_role=user.role_in_org(org.id))


# ---------------------------------------------------------------------------
# Authorization dependencies
# ---------------------------------------------------------------------------

async def require_member(actor: OrgActor = Depends(get_org_actor)) -> OrgActor:
    """Caller must hold a role in the org."""
    if actor.role is None:
        raise ForbiddenError("You do not have access to this organization")
    return actor


async def require_group_manager(actor: OrgActor = Depends(get_org_actor)) -> OrgActor:
    """Caller's role in the org must carry the manage-group permission."""
    if actor.role is None or not actor.role.can_manage_group:
        log.info("auth.manage_group_denied", edipi=actor.edipi, org_id=actor.org_id)
        raise ForbiddenError("Managing this organization requires the manage-group permission")
    return actor
