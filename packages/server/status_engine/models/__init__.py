# SQLModel definitions, imported here so the metadata is populated.
from .base import IdMixin, TimestampMixin  # noqa: F401
from .org import Org  # noqa: F401
from .user import User  # noqa: F401
from .workspace import Workspace  # noqa: F401
from .role import Role  # noqa: F401
from .user_role import UserRole  # noqa: F401
from .access_request import AccessRequest  # noqa: F401
from .roster_column import CustomRosterColumn  # noqa: F401
