# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Query

from leavedesk.api.deps import AuthDep, ReviewerDep
from leavedesk.db import SessionDep
from leavedesk.schemas.holiday import CreateHolidayRequest, HolidayListResponse, HolidayResponse
from leavedesk.services import holiday as holiday_service

holidays_router = APIRouter(prefix="/holidays", tags=["holidays"])


@holidays_router.post(
    "",
    response_model=HolidayResponse,
    status_code=201,
)
async def create_holiday(
    payload: CreateHolidayRequest,
    session: SessionDep,
    auth: ReviewerDep,
) -> HolidayResponse:
    """Create a holiday (admin/HR only)."""
    return await holiday_service.create_holiday(session, auth, payload)


@holidays_router.get(
    "",
    response_model=HolidayListResponse,
)
async def list_holidays(
    session: SessionDep,
    auth: AuthDep,
    year: int | None = Query(default=None),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
) -> HolidayListResponse:
    """List holidays with optional year filter."""
    return await holiday_service.list_holidays(session, year, offset, limit)


@holidays_router.delete(
    "/{holiday_id}",
    status_code=204,
)
async def delete_holiday(
    holiday_id: uuid.UUID,
    session: SessionDep,
    auth: ReviewerDep,
) -> None:
    """Delete a holiday (admin/HR only)."""
    await holiday_service.delete_holiday(session, auth, holiday_id)
