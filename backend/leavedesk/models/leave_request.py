# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date, datetime

import sqlalchemy as sa
from sqlmodel import Field

from leavedesk.models.base import TimestampMixin, UUIDBase
from leavedesk.models.enums import LeaveStatus


class LeaveRequest(UUIDBase, TimestampMixin, table=True):
    """An employee's leave request with approval workflow state."""

    __tablename__ = "leave_request"
    __table_args__ = (
        sa.Index("ix_leave_request_employee_status", "employee_id", "status"),
        sa.Index("ix_leave_request_employee_start", "employee_id", "start_date"),
        sa.CheckConstraint("start_date <= end_date", name="ck_leave_request_range"),
        sa.CheckConstraint("total_days > 0", name="ck_leave_request_total_days"),
    )

    employee_id: uuid.UUID = Field(index=True)
    user_id: uuid.UUID = Field(index=True)
    type: str = Field(max_length=50)
    start_date: date
    end_date: date
    total_days: int
    reason: str | None = None
    status: str = Field(
        default=LeaveStatus.PENDING, max_length=50, index=True, sa_column_kwargs={"server_default": "PENDING"}
    )
    approved_by: uuid.UUID | None = None
    approved_at: datetime | None = Field(default=None, sa_type=sa.DateTime(timezone=True))  # ty: ignore[invalid-argument-type]
    rejection_reason: str | None = None
