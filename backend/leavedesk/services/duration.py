from __future__ import annotations

from datetime import date, timedelta
from typing import TYPE_CHECKING

from leavedesk.services.holiday import holidays_between

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

# date.weekday() values for Saturday and Sunday.
_WEEKEND_DAYS = frozenset({5, 6})


def is_weekend(day: date) -> bool:
    """Return True for Saturdays and Sundays."""
    return day.weekday() in _WEEKEND_DAYS


def first_working_day(start_date: date, end_date: date, holiday_dates: set[date]) -> date | None:
    """Return the earliest day in ``[start_date, end_date]`` that is neither a weekend nor a holiday.

    The walk stops at the first hit, so it only ever covers a run of weekends
    and holidays, never the whole range.
    """
    current_date = start_date
    one_day = timedelta(days=1)

    while current_date <= end_date:
        if not is_weekend(current_date) and current_date not in holiday_dates:
            return current_date
        current_date += one_day

    return None


async def has_working_day(session: AsyncSession, start_date: date, end_date: date) -> bool:
    """True if the inclusive range keeps at least one working day after the holiday calendar."""
    if start_date > end_date:
        return False
    holiday_dates = await holidays_between(session, start_date, end_date)
    return first_working_day(start_date, end_date, holiday_dates) is not None
