# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel

from leavedesk.models.enums import AuditAction, AuditEntityType


class AuditEntryResponse(BaseModel):
    """One audit entry. ``changed_fields`` lists keys whose value differs between snapshots."""

    id: uuid.UUID
    actor_id: uuid.UUID
    entity_type: AuditEntityType
    entity_id: uuid.UUID
    action: AuditAction
    changed_fields: list[str]
    before: dict[str, Any] | None
    after: dict[str, Any] | None
    created_at: datetime


class AuditEntryListResponse(BaseModel):
    items: list[AuditEntryResponse]
    total: int
