"""Access request: a user's pending or denied intent to join an org.

Approval deletes the row; the resulting UserRole is the durable record.
"""

from datetime import datetime
from typing import TYPE_CHECKING, Optional

import sqlalchemy as sa
from sqlmodel import Field, Relationship, SQLModel

from status_engine_shared.schemas.common import AccessRequestStatus

from .base import IdMixin, _utcnow

if TYPE_CHECKING:
    from .org import Org
    from .user import User


class AccessRequest(IdMixin, SQLModel, table=True):
    __tablename__ = "access_requests"
    # Ids must not be reused after a denied request is replaced.
    __table_args__ = {"sqlite_autoincrement": True}

    user_edipi: str = Field(foreign_key="users.edipi", nullable=False, index=True)
    org_id: int = Field(foreign_key="orgs.id", nullable=False, index=True)
    status: str = Field(default=AccessRequestStatus.PENDING.value, nullable=False)
    request_date: datetime = Field(
        default_factory=_utcnow,
        nullable=False,
        sa_type=sa.DateTime(timezone=True),
    )

    user: Optional["User"] = Relationship()
    org: Optional["Org"] = Relationship()

    @property
    def is_pending(self) -> bool:
        return self.status == AccessRequestStatus.PENDING.value

    @property
    def is_denied(self) -> bool:
        return self.status == AccessRequestStatus.DENIED.value
