"""
Access request service: the request state machine and the approval
transaction.

States are ``pending`` and ``denied``. Approval consumes the request: the
row is deleted and the resulting UserRole is the durable record.

Every function takes the caller's unit of work explicitly. The caller owns the
transaction and rolls it back when any of these functions raises; the single
exception is the already-a-member cleanup in ``approve_access_request``, which
commits the deletion of the stale request before failing.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional, Sequence

import structlog

from status_engine.core.auth import OrgActor
from status_engine.core.errors import BadRequestError, NotFoundError, UnauthorizedError
from status_engine.models import AccessRequest, Org, User
from status_engine.repositories.base import DuplicateMembershipError, UnitOfWork
from status_engine_shared.schemas.common import AccessRequestStatus

log = structlog.get_logger()


async def _get_org_or_404(uow: UnitOfWork, org_id: int) -> Org:
    org = await uow.orgs.get(org_id)
    if not org:
        raise NotFoundError("Organization was not found.")
    return org


def _require_registered(user: User) -> None:
    if not user.is_registered:
        raise BadRequestError("User is not registered")


async def list_pending_requests(uow: UnitOfWork, org_id: int) -> Sequence[AccessRequest]:
    """Pending requests of the org, oldest first, with user and org loaded."""
    return await uow.access_requests.list_pending(org_id)


async def issue_access_request(uow: UnitOfWork, user: User, org_id: int) -> AccessRequest:
    """Create a pending request for ``user`` to join the org.

    A denied request is replaced by a fresh one; a pending request may not be
    issued twice.
    """
    _require_registered(user)
    org = await _get_org_or_404(uow, org_id)

    existing = await uow.access_requests.find_for_user(org.id, user.edipi)
    if existing:
        if not existing.is_denied:
            raise BadRequestError("The access request has already been issued.")
        # Remove the denied request so a new one can be issued.
        await uow.access_requests.delete(existing)
        log.info(
            "access_request.denied_replaced",
            request_id=existing.id,
            edipi=user.edipi,
            org_id=org.id,
        )

    request = AccessRequest(
        user_edipi=user.edipi,
        org_id=org.id,
        status=AccessRequestStatus.PENDING.value,
        request_date=datetime.now(timezone.utc),
    )
    request.user = user
    request.org = org
    await uow.access_requests.add(request)

    log.info("access_request.issued", request_id=request.id, edipi=user.edipi, org_id=org.id)
    return request


async def cancel_access_request(uow: UnitOfWork, user: User, org_id: int) -> None:
    """Withdraw the caller's own request, whatever its state."""
    _require_registered(user)
    org = await _get_org_or_404(uow, org_id)

    request = await uow.access_requests.find_for_user(org.id, user.edipi)
    if not request:
        raise NotFoundError("Access request was not found.")

    await uow.access_requests.delete(request)
    log.info("access_request.cancelled", request_id=request.id, edipi=user.edipi, org_id=org.id)


async def approve_access_request(
    uow: UnitOfWork,
    actor: OrgActor,
    request_id: Optional[int],
    role_id: Optional[int],
) -> AccessRequest:
    """Grant ``role_id`` to the requester of ``request_id`` and consume the request.

    Returns the deleted request. Fails with:
    - 400 if an id is missing, the request is not pending, or the requester
      already has a role in the org (the stale request is deleted and
      committed first)
    - 404 if the request, role or requesting user does not exist in the org
    - 401 if the actor's role does not cover every permission of the target role
    """
    if not request_id:
        raise BadRequestError("Missing access request id")
    if not role_id:
        raise BadRequestError("Missing role for approved access request")

    org_id = actor.org_id

    request = await uow.access_requests.get(org_id, request_id)
    if not request:
        raise NotFoundError("Access request was not found")
    if not request.is_pending:
        raise BadRequestError("Only pending access requests can be approved")

    role = await uow.roles.get(org_id, role_id)
    if not role:
        raise NotFoundError("Role was not found")

    if actor.role is None or not actor.role.is_superset_of(role):
        log.info(
            "access_request.approve_unauthorized",
            request_id=request.id,
            role_id=role.id,
            actor=actor.edipi,
        )
        raise UnauthorizedError(
            "Unable to assign a role with greater permissions than your current role."
        )

    user = await uow.users.get(request.user_edipi)
    if not user:
        raise NotFoundError("User was not found")

    if user.role_in_org(org_id) is not None:
        # The request is stale: drop it for good even though approval fails.
        await uow.access_requests.delete(request)
        await uow.commit()
        log.info(
            "access_request.stale_removed",
            request_id=request.id,
            edipi=user.edipi,
            org_id=org_id,
        )
        raise BadRequestError("User already has a role in the organization")

    try:
        await uow.users.add_role(user, role)
    except DuplicateMembershipError:
        raise BadRequestError("User already has a role in the organization")

    await uow.access_requests.delete(request)

    log.info(
        "access_request.approved",
        request_id=request.id,
        edipi=user.edipi,
        org_id=org_id,
        role_id=role.id,
        actor=actor.edipi,
    )
    return request


async def deny_access_request(
    uow: UnitOfWork, actor: OrgActor, request_id: Optional[int]
) -> AccessRequest:
    """Mark a request denied. The row is kept until re-issued or cancelled."""
    if not request_id:
        raise BadRequestError("Missing access request id")

    request = await uow.access_requests.get(actor.org_id, request_id)
    if not request:
        raise NotFoundError("Access request was not found.")
    if not request.is_pending:
        raise BadRequestError("Only pending access requests can be denied")

    request.status = AccessRequestStatus.DENIED.value
    await uow.flush()

    log.info("access_request.denied", request_id=request.id, org_id=actor.org_id, actor=actor.edipi)
    return request
