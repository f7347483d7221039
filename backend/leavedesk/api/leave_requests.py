# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid
from datetime import date

from fastapi import APIRouter, Query, status

from leavedesk.api.deps import AuthDep, ReviewerDep
from leavedesk.db import SessionDep
from leavedesk.models.enums import LeaveStatus
from leavedesk.schemas.balance import LeaveBalanceResponse
from leavedesk.schemas.leave_request import (
    CreateLeaveRequestPayload,
    LeaveRequestListResponse,
    LeaveRequestResponse,
    ReviewPayload,
    UpdateLeaveRequestPayload,
)
from leavedesk.services import balance as balance_service
from leavedesk.services import leave_request as leave_request_service

leave_requests_router = APIRouter(prefix="/leave-requests", tags=["leave-requests"])


@leave_requests_router.post("", response_model=LeaveRequestResponse, status_code=status.HTTP_201_CREATED)
async def create_leave_request(
    payload: CreateLeaveRequestPayload,
    session: SessionDep,
    auth: AuthDep,
) -> LeaveRequestResponse:
    """Create a new leave request."""
    return await leave_request_service.create_leave_request(session, auth, payload)


@leave_requests_router.get("", response_model=LeaveRequestListResponse)
async def list_leave_requests(
    session: SessionDep,
    auth: ReviewerDep,
    employee_id: uuid.UUID | None = Query(default=None),
    status_filter: LeaveStatus | None = Query(default=None, alias="status"),
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
) -> LeaveRequestListResponse:
    """List leave requests with optional filters (admin/HR only)."""
    return await leave_request_service.list_leave_requests(
        session, employee_id, status_filter, start_date, end_date, offset, limit
    )


@leave_requests_router.get("/pending", response_model=LeaveRequestListResponse)
async def list_pending_leave_requests(
    session: SessionDep,
    auth: ReviewerDep,
) -> LeaveRequestListResponse:
    """List pending leave requests awaiting review (admin/HR only)."""
    return await leave_request_service.list_pending_leave_requests(session)


@leave_requests_router.get("/mine", response_model=LeaveRequestListResponse)
async def list_my_leave_requests(
    session: SessionDep,
    auth: AuthDep,
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
) -> LeaveRequestListResponse:
    """List the caller's own leave requests."""
    return await leave_request_service.list_my_leave_requests(session, auth, offset, limit)


@leave_requests_router.get("/balance/{employee_id}", response_model=LeaveBalanceResponse)
async def get_employee_leave_balance(
    employee_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
    year: int | None = Query(default=None, ge=1900, le=9999),
) -> LeaveBalanceResponse:
    """Get an employee's leave balance for a year (defaults to the current year)."""
    return await balance_service.get_employee_leave_balance(session, employee_id, year)


@leave_requests_router.get("/{request_id}", response_model=LeaveRequestResponse)
async def get_leave_request(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> LeaveRequestResponse:
    """Get a single leave request."""
    return await leave_request_service.get_leave_request(session, request_id)


@leave_requests_router.patch("/{request_id}", response_model=LeaveRequestResponse)
async def update_leave_request(
    request_id: uuid.UUID,
    payload: UpdateLeaveRequestPayload,
    session: SessionDep,
    auth: AuthDep,
) -> LeaveRequestResponse:
    """Edit a pending leave request (owner only)."""
    return await leave_request_service.update_leave_request(session, auth, request_id, payload)


@leave_requests_router.post("/{request_id}/approve", response_model=LeaveRequestResponse)
async def review_leave_request(
    request_id: uuid.UUID,
    payload: ReviewPayload,
    session: SessionDep,
    auth: ReviewerDep,
) -> LeaveRequestResponse:
    """Approve or reject a pending leave request (admin/HR only)."""
    return await leave_request_service.review_leave_request(session, auth, request_id, payload)


@leave_requests_router.post("/{request_id}/cancel", response_model=LeaveRequestResponse)
async def cancel_leave_request(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> LeaveRequestResponse:
    """Cancel a leave request (owner only)."""
    return await leave_request_service.cancel_leave_request(session, auth, request_id)
