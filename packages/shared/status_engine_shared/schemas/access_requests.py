"""
Access request schemas.

Ids in request bodies are optional at the schema level so that a missing id
is reported by the service as a 400 with a specific message.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from .common import AccessRequestStatus, CamelModel
from .organizations import OrgSummary
from .users import UserSummary


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class AccessRequestBody(CamelModel):
    request_id: Optional[int] = None


class ApproveAccessRequestBody(AccessRequestBody):
    role_id: Optional[int] = None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class AccessRequestResponse(CamelModel):
    id: int
    user: UserSummary
    org: OrgSummary
    status: AccessRequestStatus
    request_date: datetime


class ApproveAccessRequestResponse(CamelModel):
    success: bool = True
    request: AccessRequestResponse
