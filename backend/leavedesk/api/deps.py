# ruff: noqa: B008, TC003
from __future__ import annotations

import uuid
from typing import Annotated

from fastapi import Depends, Header

from leavedesk.exceptions import AppError, ErrorCode
from leavedesk.schemas.auth import AuthContext


async def get_auth_context(
    x_user_id: uuid.UUID = Header(),
    x_role: str = Header(default="employee"),
) -> AuthContext:
    """Extract dev auth context from request headers."""
    return AuthContext(user_id=x_user_id, role=x_role.lower())


AuthDep = Annotated[AuthContext, Depends(get_auth_context)]


async def require_reviewer(
    auth: AuthDep,
) -> AuthContext:
    """Require an admin or HR role for the request."""
    if not auth.is_privileged:
        raise AppError("Admin or HR access required", code=ErrorCode.FORBIDDEN)
    return auth


ReviewerDep = Annotated[AuthContext, Depends(require_reviewer)]
