# ruff: noqa: TC001
from __future__ import annotations

from pydantic import BaseModel

from leavedesk.schemas.leave_request import LeaveRequestResponse


class LeaveBalanceResponse(BaseModel):
    """Point-in-time leave balance for one employee and calendar year.

    ``used`` counts every approved request starting in the year, sick leave
    included, so it can differ from the figure the allowance checks use.
    """

    year: int
    total_allowance: int
    used: int
    remaining: int
    leave_requests: list[LeaveRequestResponse]
