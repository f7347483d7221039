from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlmodel import col

from leavedesk.exceptions import AppError, ErrorCode
from leavedesk.models.enums import AuditAction, AuditEntityType
from leavedesk.models.holiday import Holiday
from leavedesk.schemas.holiday import HolidayListResponse, HolidayResponse
from leavedesk.services.audit import model_to_audit_dict, write_audit_log

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.ext.asyncio import AsyncSession

    from leavedesk.schemas.auth import AuthContext
    from leavedesk.schemas.holiday import CreateHolidayRequest


def _build_holiday_response(holiday: Holiday) -> HolidayResponse:
    return HolidayResponse(
        id=holiday.id,
        date=holiday.date,
        name=holiday.name,
    )


async def holidays_between(session: AsyncSession, start_date: date, end_date: date) -> set[date]:
    """Return the holiday dates falling inside ``[start_date, end_date]``."""
    result = await session.execute(
        select(col(Holiday.date)).where(
            col(Holiday.date) >= start_date,
            col(Holiday.date) <= end_date,
        )
    )
    return {row[0] for row in result.all()}


async def create_holiday(
    session: AsyncSession,
    auth: AuthContext,
    payload: CreateHolidayRequest,
) -> HolidayResponse:
    """Create a holiday."""
    holiday = Holiday(date=payload.date, name=payload.name)
    session.add(holiday)

    try:
        await session.flush()
    except IntegrityError:
        await session.rollback()
        raise AppError("Holiday already exists for this date", status_code=409) from None

    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.HOLIDAY,
        entity_id=holiday.id,
        action=AuditAction.CREATE,
        after_json=model_to_audit_dict(holiday),
    )

    await session.commit()
    await session.refresh(holiday)
    return _build_holiday_response(holiday)


async def list_holidays(
    session: AsyncSession,
    year: int | None = None,
    offset: int = 0,
    limit: int = 50,
) -> HolidayListResponse:
    """List holidays ordered by date, optionally limited to one calendar year."""
    base_filter = []
    if year is not None:
        base_filter.extend([col(Holiday.date) >= date(year, 1, 1), col(Holiday.date) <= date(year, 12, 31)])

    count_result = await session.execute(select(func.count()).select_from(Holiday).where(*base_filter))
    total = count_result.scalar_one()

    result = await session.execute(
        select(Holiday).where(*base_filter).order_by(col(Holiday.date)).offset(offset).limit(limit)
    )
    holidays = list(result.scalars().all())

    return HolidayListResponse(
        items=[_build_holiday_response(h) for h in holidays],
        total=total,
    )


async def get_holiday(session: AsyncSession, holiday_id: uuid.UUID) -> Holiday:
    """Get a single holiday or raise 404."""
    result = await session.execute(select(Holiday).where(col(Holiday.id) == holiday_id))
    holiday = result.scalar_one_or_none()
    if holiday is None:
        raise AppError("Holiday not found", code=ErrorCode.NOT_FOUND)
    return holiday


async def delete_holiday(
    session: AsyncSession,
    auth: AuthContext,
    holiday_id: uuid.UUID,
) -> None:
    """Delete a holiday."""
    holiday = await get_holiday(session, holiday_id)

    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.HOLIDAY,
        entity_id=holiday.id,
        action=AuditAction.DELETE,
        before_json=model_to_audit_dict(holiday),
    )

    await session.delete(holiday)
    await session.commit()
