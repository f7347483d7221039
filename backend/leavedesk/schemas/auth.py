# ruff: noqa: TC003
from __future__ import annotations

import uuid

from pydantic import BaseModel

from leavedesk.config import get_settings


class AuthContext(BaseModel):
    """Dev auth context extracted from request headers."""

    user_id: uuid.UUID
    role: str = "employee"

    @property
    def is_privileged(self) -> bool:
        """Admins and HR may act on behalf of other employees and review requests."""
        return self.role in get_settings().privileged_roles
