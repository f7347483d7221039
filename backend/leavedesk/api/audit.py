# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Query

from leavedesk.api.deps import ReviewerDep
from leavedesk.db import SessionDep
from leavedesk.models.enums import AuditEntityType
from leavedesk.schemas.audit import AuditEntryListResponse
from leavedesk.services import audit as audit_service

audit_router = APIRouter(prefix="/audit", tags=["audit"])


@audit_router.get("", response_model=AuditEntryListResponse)
async def list_audit_entries(
    session: SessionDep,
    auth: ReviewerDep,
    entity_type: AuditEntityType | None = Query(default=None),
    entity_id: uuid.UUID | None = Query(default=None),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
) -> AuditEntryListResponse:
    """Browse the audit trail (admin/HR only)."""
    return await audit_service.list_audit_entries(session, entity_type, entity_id, offset, limit)
