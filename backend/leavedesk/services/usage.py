# ruff: noqa: TC003
from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import case, func, select
from sqlmodel import col

from leavedesk.models.enums import ACTIVE_STATUSES, LeaveStatus, LeaveType
from leavedesk.models.leave_request import LeaveRequest

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


@dataclass(frozen=True)
class LeaveUsage:
    """Allowance-relevant days for one employee and calendar year.

    ``approved_days`` counts APPROVED requests only; ``committed_days`` adds
    PENDING ones. Sick leave is never part of either figure.
    """

    approved_days: int
    committed_days: int


def year_bounds(year: int) -> tuple[date, date]:
    """Return the first and last day of ``year``."""
    return date(year, 1, 1), date(year, 12, 31)


async def get_yearly_usage(
    session: AsyncSession,
    employee_id: uuid.UUID,
    year: int,
    exclude_request_id: uuid.UUID | None = None,
) -> LeaveUsage:
    """Sum approved and committed non-sick days for requests starting in ``year``."""
    start_of_year, end_of_year = year_bounds(year)

    query = select(
        func.coalesce(
            func.sum(
                case(
                    (
                        col(LeaveRequest.status) == LeaveStatus.APPROVED.value,
                        col(LeaveRequest.total_days),
                    ),
                    else_=0,
                )
            ),
            0,
        ).label("approved"),
        func.coalesce(func.sum(col(LeaveRequest.total_days)), 0).label("committed"),
    ).where(
        col(LeaveRequest.employee_id) == employee_id,
        col(LeaveRequest.start_date) >= start_of_year,
        col(LeaveRequest.start_date) <= end_of_year,
        col(LeaveRequest.status).in_([s.value for s in ACTIVE_STATUSES]),
        col(LeaveRequest.type) != LeaveType.SICK.value,
    )
    if exclude_request_id is not None:
        query = query.where(col(LeaveRequest.id) != exclude_request_id)

    result = await session.execute(query)
    row = result.one()
    return LeaveUsage(approved_days=int(row.approved), committed_days=int(row.committed))
