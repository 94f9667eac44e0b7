"""Organization schemas shared by the API and its clients."""

from __future__ import annotations

from typing import Optional

from .common import CamelModel


class OrgSummary(CamelModel):
    id: int
    name: str
    description: str = ""
    contact_edipi: Optional[str] = None
