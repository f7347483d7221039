# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Self

from pydantic import BaseModel, Field, model_validator

from leavedesk.models.enums import LeaveStatus, LeaveType

# ---------------------------------------------------------------------------
# Request payloads
# ---------------------------------------------------------------------------


class CreateLeaveRequestPayload(BaseModel):
    """Request body for creating a leave request.

    ``employee_id`` may only be set by admin/HR callers filing on behalf of
    someone else; otherwise the caller's own employee record is used.
    """

    employee_id: uuid.UUID | None = None
    type: LeaveType
    start_date: date
    end_date: date
    total_days: int
    reason: str | None = Field(default=None, max_length=2000)


class UpdateLeaveRequestPayload(BaseModel):
    """Partial update of a pending leave request. Omitted fields keep their value."""

    type: LeaveType | None = None
    start_date: date | None = None
    end_date: date | None = None
    total_days: int | None = None
    reason: str | None = Field(default=None, max_length=2000)


class ReviewPayload(BaseModel):
    """Request body for approving or rejecting a leave request."""

    status: LeaveStatus
    rejection_reason: str | None = Field(default=None, max_length=2000)

    @model_validator(mode="after")
    def _validate_decision(self) -> Self:
        if self.status not in (LeaveStatus.APPROVED, LeaveStatus.REJECTED):
            msg = "status must be APPROVED or REJECTED"
            raise ValueError(msg)
        if self.rejection_reason is not None and not self.rejection_reason.strip():
            self.rejection_reason = None
        return self


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class LeaveRequestResponse(BaseModel):
    """Response schema for a single leave request."""

    id: uuid.UUID
    employee_id: uuid.UUID
    user_id: uuid.UUID
    type: LeaveType
    start_date: date
    end_date: date
    total_days: int
    reason: str | None
    status: LeaveStatus
    approved_by: uuid.UUID | None
    approved_at: datetime | None
    rejection_reason: str | None
    created_at: datetime
    updated_at: datetime


class LeaveRequestListResponse(BaseModel):
    """Paginated list of leave requests."""

    items: list[LeaveRequestResponse]
    total: int
