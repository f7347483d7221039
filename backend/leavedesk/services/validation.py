# ruff: noqa: TC003
from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from leavedesk.exceptions import AllowanceExceededError, AppError, ErrorCode
from leavedesk.models.enums import ACTIVE_STATUSES, LeaveType
from leavedesk.models.leave_request import LeaveRequest
from leavedesk.services.allowance import get_annual_allowance
from leavedesk.services.duration import has_working_day
from leavedesk.services.employee import get_employee_service
from leavedesk.services.usage import get_yearly_usage

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


async def find_overlapping_request(
    session: AsyncSession,
    employee_id: uuid.UUID,
    start_date: date,
    end_date: date,
    exclude_request_id: uuid.UUID | None = None,
) -> LeaveRequest | None:
    """Return a PENDING or APPROVED request sharing at least one day with the range.

    Ranges are inclusive: existing.start_date <= end_date AND
    existing.end_date >= start_date.
    """
    query = select(LeaveRequest).where(
        col(LeaveRequest.employee_id) == employee_id,
        col(LeaveRequest.status).in_([s.value for s in ACTIVE_STATUSES]),
        col(LeaveRequest.start_date) <= end_date,
        col(LeaveRequest.end_date) >= start_date,
    )
    if exclude_request_id is not None:
        query = query.where(col(LeaveRequest.id) != exclude_request_id)

    result = await session.execute(query.limit(1))
    return result.scalar_one_or_none()


async def validate_leave_request(
    session: AsyncSession,
    *,
    employee_id: uuid.UUID,
    start_date: date,
    end_date: date,
    total_days: int,
    leave_type: LeaveType,
    exclude_request_id: uuid.UUID | None = None,
    today: date | None = None,
) -> None:
    """Run every creation/edit check in order, raising on the first failure.

    1. Employee exists.
    2. start_date <= end_date.
    3. start_date is today or later.
    4. total_days > 0.
    5. The range keeps at least one working day once weekends and holidays go.
    6. No overlapping PENDING/APPROVED request for the employee.
    7. Non-sick leave fits in what remains of the allowance after committed days.
    """
    today = today or date.today()

    # 1. Employee.
    employee = await get_employee_service().get_employee(employee_id)
    if employee is None:
        raise AppError(f"Employee with ID {employee_id} not found", code=ErrorCode.NOT_FOUND)

    # 2. Range.
    if start_date > end_date:
        raise AppError("Start date must be on or before end date", code=ErrorCode.INVALID_RANGE)

    # 3. Past dates.
    if start_date < today:
        raise AppError("Leave requests must start today or later", code=ErrorCode.PAST_DATE)

    # 4. Duration.
    if total_days <= 0:
        raise AppError("Requested leave days must be greater than zero", code=ErrorCode.INVALID_DURATION)

    # 5. Working days.
    if not await has_working_day(session, start_date, end_date):
        raise AppError(
            "Selected dates fall entirely on weekends or holidays",
            code=ErrorCode.ALL_NON_WORKING_DAYS,
        )

    # 6. Overlap.
    overlapping = await find_overlapping_request(session, employee_id, start_date, end_date, exclude_request_id)
    if overlapping is not None:
        raise AppError("Leave request overlaps with an existing request", code=ErrorCode.OVERLAP)

    # 7. Allowance against committed days.
    if leave_type.counts_against_allowance:
        annual_allowance = await get_annual_allowance(session)
        usage = await get_yearly_usage(session, employee_id, start_date.year, exclude_request_id)
        remaining = max(annual_allowance - usage.committed_days, 0)
        if total_days > remaining:
            logger.info(
                "Employee %s requested %d day(s) with %d remaining for %d",
                employee_id,
                total_days,
                remaining,
                start_date.year,
            )
            raise AllowanceExceededError(
                f"Requested leave exceeds the remaining PTO balance of {remaining} day(s)",
                remaining_days=remaining,
            )
