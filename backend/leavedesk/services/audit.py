from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import func, select
from sqlmodel import col

from leavedesk.models.audit import AuditLog
from leavedesk.schemas.audit import AuditEntryListResponse, AuditEntryResponse

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlmodel import SQLModel

    from leavedesk.models.enums import AuditAction, AuditEntityType


def model_to_audit_dict(model: SQLModel, exclude: set[str] | None = None) -> dict[str, Any]:
    """Snapshot a row as JSON-safe values for the audit trail."""
    return model.model_dump(mode="json", exclude=exclude)


async def write_audit_log(
    session: AsyncSession,
    *,
    actor_id: uuid.UUID,
    entity_type: AuditEntityType,
    entity_id: uuid.UUID,
    action: AuditAction,
    before_json: dict[str, Any] | None = None,
    after_json: dict[str, Any] | None = None,
) -> AuditLog:
    """Stage an audit entry in the caller's transaction. The caller commits."""
    entry = AuditLog(
        actor_id=actor_id,
        entity_type=entity_type.value,
        entity_id=entity_id,
        action=action.value,
        before_json=before_json,
        after_json=after_json,
    )
    session.add(entry)
    return entry


def _changed_fields(entry: AuditLog) -> list[str]:
    before = entry.before_json or {}
    after = entry.after_json or {}
    return sorted(key for key in before.keys() | after.keys() if before.get(key) != after.get(key))


async def list_audit_entries(
    session: AsyncSession,
    entity_type: AuditEntityType | None = None,
    entity_id: uuid.UUID | None = None,
    offset: int = 0,
    limit: int = 50,
) -> AuditEntryListResponse:
    """Audit history, oldest first, optionally narrowed to one entity."""
    filters = []
    if entity_type is not None:
        filters.append(col(AuditLog.entity_type) == entity_type.value)
    if entity_id is not None:
        filters.append(col(AuditLog.entity_id) == entity_id)

    count_result = await session.execute(select(func.count()).select_from(AuditLog).where(*filters))
    total = count_result.scalar_one()

    result = await session.execute(
        select(AuditLog).where(*filters).order_by(col(AuditLog.created_at)).offset(offset).limit(limit)
    )
    entries = result.scalars().all()

    return AuditEntryListResponse(
        items=[
            AuditEntryResponse(
                id=e.id,
                actor_id=e.actor_id,
                entity_type=e.entity_type,
                entity_id=e.entity_id,
                action=e.action,
                changed_fields=_changed_fields(e),
                before=e.before_json,
                after=e.after_json,
                created_at=e.created_at,
            )
            for e in entries
        ],
        total=total,
    )
