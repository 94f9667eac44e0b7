from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for wire schemas: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class AccessRequestStatus(str, Enum):
    PENDING = "pending"
    DENIED = "denied"


# Capability flags carried by every role, in display order.
CAPABILITY_FLAGS: tuple[str, ...] = (
    "can_manage_group",
    "can_manage_roster",
    "can_manage_workspace",
    "can_view_roster",
    "can_view_muster",
    "can_view_pii",
    "can_view_phi",
)


class ErrorBody(BaseModel):
    code: str
    message: str
    status: int


class ErrorResponse(BaseModel):
    """Envelope for every non-2xx response."""

    error: ErrorBody
