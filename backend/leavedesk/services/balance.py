# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from leavedesk.models.enums import LeaveStatus
from leavedesk.models.leave_request import LeaveRequest
from leavedesk.schemas.balance import LeaveBalanceResponse
from leavedesk.services.allowance import get_annual_allowance
from leavedesk.services.leave_request import build_leave_request_response
from leavedesk.services.usage import year_bounds

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


async def get_employee_leave_balance(
    session: AsyncSession,
    employee_id: uuid.UUID,
    year: int | None = None,
) -> LeaveBalanceResponse:
    """Summarize allowance, used and remaining days for an employee and year.

    ``used`` is the sum over APPROVED requests starting in the year with no
    type exclusion, so sick leave shows up here even though it never limits
    new requests. ``remaining`` is floored at zero.
    """
    target_year = year or date.today().year
    start_of_year, end_of_year = year_bounds(target_year)

    result = await session.execute(
        select(LeaveRequest)
        .where(
            col(LeaveRequest.employee_id) == employee_id,
            col(LeaveRequest.status) == LeaveStatus.APPROVED.value,
            col(LeaveRequest.start_date) >= start_of_year,
            col(LeaveRequest.start_date) <= end_of_year,
        )
        .order_by(col(LeaveRequest.start_date))
    )
    approved = list(result.scalars().all())

    used = sum(r.total_days for r in approved)
    annual_allowance = await get_annual_allowance(session)

    return LeaveBalanceResponse(
        year=target_year,
        total_allowance=annual_allowance,
        used=used,
        remaining=max(annual_allowance - used, 0),
        leave_requests=[build_leave_request_response(r) for r in approved],
    )
