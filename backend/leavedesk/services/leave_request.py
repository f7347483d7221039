# ruff: noqa: TC003
from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import col

from leavedesk.db import lock_employee_scope
from leavedesk.exceptions import AllowanceExceededError, AppError, ErrorCode
from leavedesk.models.base import now_utc
from leavedesk.models.enums import AuditAction, AuditEntityType, LeaveStatus, LeaveType, NotificationType
from leavedesk.models.leave_request import LeaveRequest
from leavedesk.schemas.leave_request import LeaveRequestListResponse, LeaveRequestResponse
from leavedesk.services.allowance import get_annual_allowance
from leavedesk.services.audit import model_to_audit_dict, write_audit_log
from leavedesk.services.employee import get_employee_service
from leavedesk.services.notification import build_notification, dispatch_notification
from leavedesk.services.usage import get_yearly_usage
from leavedesk.services.validation import validate_leave_request

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from leavedesk.schemas.auth import AuthContext
    from leavedesk.schemas.leave_request import (
        CreateLeaveRequestPayload,
        ReviewPayload,
        UpdateLeaveRequestPayload,
    )
    from leavedesk.services.employee import EmployeeInfo

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = ("type", "start_date", "end_date", "total_days", "reason")


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def build_leave_request_response(leave_request: LeaveRequest) -> LeaveRequestResponse:
    """Map a leave request model to its response schema."""
    return LeaveRequestResponse(
        id=leave_request.id,
        employee_id=leave_request.employee_id,
        user_id=leave_request.user_id,
        type=LeaveType(leave_request.type),
        start_date=leave_request.start_date,
        end_date=leave_request.end_date,
        total_days=leave_request.total_days,
        reason=leave_request.reason,
        status=LeaveStatus(leave_request.status),
        approved_by=leave_request.approved_by,
        approved_at=leave_request.approved_at,
        rejection_reason=leave_request.rejection_reason,
        created_at=leave_request.created_at,
        updated_at=leave_request.updated_at,
    )


async def _get_leave_request_or_404(session: AsyncSession, request_id: uuid.UUID) -> LeaveRequest:
    """Fetch a leave request by ID. Raises 404 if not found."""
    result = await session.execute(select(LeaveRequest).where(col(LeaveRequest.id) == request_id))
    leave_request = result.scalar_one_or_none()
    if leave_request is None:
        raise AppError(f"Leave request with ID {request_id} not found", code=ErrorCode.NOT_FOUND)
    return leave_request


async def _get_caller_employee(auth: AuthContext) -> EmployeeInfo:
    """Return the employee record linked to the authenticated user."""
    employee = await get_employee_service().get_employee_by_user(auth.user_id)
    if employee is None:
        raise AppError(f"No employee record for user {auth.user_id}", code=ErrorCode.NOT_FOUND)
    return employee


async def _resolve_target_employee(auth: AuthContext, employee_id: uuid.UUID | None) -> EmployeeInfo:
    """Pick the employee a new request is filed for.

    Admin and HR callers may name any employee; everybody else files for
    themselves.
    """
    employee_service = get_employee_service()

    if employee_id is None:
        return await _get_caller_employee(auth)

    if not auth.is_privileged:
        caller = await employee_service.get_employee_by_user(auth.user_id)
        if caller is None or caller.id != employee_id:
            raise AppError(
                "Only admin or HR can submit leave on behalf of another employee",
                code=ErrorCode.FORBIDDEN,
            )

    employee = await employee_service.get_employee(employee_id)
    if employee is None:
        raise AppError(f"Employee with ID {employee_id} not found", code=ErrorCode.NOT_FOUND)
    return employee


async def _ensure_owner(auth: AuthContext, leave_request: LeaveRequest, action: str) -> None:
    caller = await get_employee_service().get_employee_by_user(auth.user_id)
    if caller is None or caller.id != leave_request.employee_id:
        raise AppError(f"You can only {action} your own leave requests", code=ErrorCode.FORBIDDEN)


async def _compare_and_set(
    session: AsyncSession,
    request_id: uuid.UUID,
    guard: Any,
    values: dict[str, Any],
) -> bool:
    """Apply ``values`` only if the row still satisfies ``guard``. Returns True on success."""
    result = await session.execute(
        update(LeaveRequest)
        .where(col(LeaveRequest.id) == request_id, guard)
        .values(**values, updated_at=now_utc())
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1  # type: ignore[attr-defined]


async def _flush_or_overlap(session: AsyncSession) -> None:
    """Flush pending writes, mapping the storage-level exclusion constraint to OVERLAP."""
    try:
        await session.flush()
    except IntegrityError:
        await session.rollback()
        raise AppError("Leave request overlaps with an existing request", code=ErrorCode.OVERLAP) from None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def create_leave_request(
    session: AsyncSession,
    auth: AuthContext,
    payload: CreateLeaveRequestPayload,
) -> LeaveRequestResponse:
    """Create a PENDING leave request.

    Flow:
    1. Resolve the target employee (self, or anyone for admin/HR)
    2. Lock the employee scope for the rest of the transaction
    3. Validate against committed usage
    4. Insert the request
    5. Audit log, commit, notify reviewers
    """
    employee = await _resolve_target_employee(auth, payload.employee_id)

    await lock_employee_scope(session, employee.id)

    await validate_leave_request(
        session,
        employee_id=employee.id,
        start_date=payload.start_date,
        end_date=payload.end_date,
        total_days=payload.total_days,
        leave_type=payload.type,
    )

    leave_request = LeaveRequest(
        employee_id=employee.id,
        user_id=employee.user_id,
        type=payload.type.value,
        start_date=payload.start_date,
        end_date=payload.end_date,
        total_days=payload.total_days,
        reason=payload.reason,
        status=LeaveStatus.PENDING.value,
    )
    session.add(leave_request)
    await _flush_or_overlap(session)

    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.LEAVE_REQUEST,
        entity_id=leave_request.id,
        action=AuditAction.CREATE,
        after_json=model_to_audit_dict(leave_request),
    )

    await session.commit()
    await session.refresh(leave_request)
    logger.info(
        "Leave request %s created for employee %s (%s, %d day(s))",
        leave_request.id,
        leave_request.employee_id,
        leave_request.type,
        leave_request.total_days,
    )

    reviewers = await get_employee_service().list_reviewer_user_ids()
    await dispatch_notification(reviewers, build_notification(NotificationType.LEAVE_REQUESTED, leave_request))

    return build_leave_request_response(leave_request)


async def update_leave_request(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
    payload: UpdateLeaveRequestPayload,
) -> LeaveRequestResponse:
    """Edit a pending request owned by the caller, re-validating the merged fields."""
    leave_request = await _get_leave_request_or_404(session, request_id)

    await _ensure_owner(auth, leave_request, "update")

    if leave_request.status != LeaveStatus.PENDING.value:
        raise AppError("Can only update pending leave requests", code=ErrorCode.NOT_PENDING)

    changes = {key: value for key, value in payload.model_dump(exclude_unset=True).items() if key in _EDITABLE_FIELDS}
    # Explicit nulls only make sense for the free-text reason.
    changes = {key: value for key, value in changes.items() if value is not None or key == "reason"}
    if "type" in changes:
        changes["type"] = LeaveType(changes["type"]).value

    next_type = LeaveType(changes.get("type", leave_request.type))
    next_start: date = changes.get("start_date", leave_request.start_date)
    next_end: date = changes.get("end_date", leave_request.end_date)
    next_total: int = changes.get("total_days", leave_request.total_days)

    await lock_employee_scope(session, leave_request.employee_id)

    await validate_leave_request(
        session,
        employee_id=leave_request.employee_id,
        start_date=next_start,
        end_date=next_end,
        total_days=next_total,
        leave_type=next_type,
        exclude_request_id=leave_request.id,
    )

    before_dict = model_to_audit_dict(leave_request)

    try:
        updated = await _compare_and_set(
            session,
            leave_request.id,
            col(LeaveRequest.status) == LeaveStatus.PENDING.value,
            changes,
        )
    except IntegrityError:
        await session.rollback()
        raise AppError("Leave request overlaps with an existing request", code=ErrorCode.OVERLAP) from None
    if not updated:
        raise AppError("Can only update pending leave requests", code=ErrorCode.NOT_PENDING)

    await session.refresh(leave_request)

    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.LEAVE_REQUEST,
        entity_id=leave_request.id,
        action=AuditAction.UPDATE,
        before_json=before_dict,
        after_json=model_to_audit_dict(leave_request),
    )

    await session.commit()
    await session.refresh(leave_request)
    logger.info("Leave request %s updated by %s", leave_request.id, auth.user_id)
    return build_leave_request_response(leave_request)


async def review_leave_request(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
    payload: ReviewPayload,
) -> LeaveRequestResponse:
    """Approve or reject a pending request.

    Approval of non-sick leave re-checks the allowance against days already
    approved elsewhere in the year. Pending requests are not counted here,
    unlike at creation and edit time.
    """
    leave_request = await _get_leave_request_or_404(session, request_id)
    target = LeaveStatus(payload.status)

    if not LeaveStatus(leave_request.status).can_transition_to(target):
        raise AppError("Can only review pending leave requests", code=ErrorCode.NOT_PENDING)

    await lock_employee_scope(session, leave_request.employee_id)

    if target == LeaveStatus.APPROVED and LeaveType(leave_request.type).counts_against_allowance:
        annual_allowance = await get_annual_allowance(session)
        usage = await get_yearly_usage(
            session,
            leave_request.employee_id,
            leave_request.start_date.year,
            exclude_request_id=leave_request.id,
        )
        if usage.approved_days + leave_request.total_days > annual_allowance:
            raise AllowanceExceededError(
                f"Approving this request would exceed the annual allowance of {annual_allowance} days",
                remaining_days=max(annual_allowance - usage.approved_days, 0),
            )

    before_dict = model_to_audit_dict(leave_request)

    updated = await _compare_and_set(
        session,
        leave_request.id,
        col(LeaveRequest.status) == LeaveStatus.PENDING.value,
        {
            "status": target.value,
            "approved_by": auth.user_id,
            "approved_at": now_utc(),
            "rejection_reason": payload.rejection_reason,
        },
    )
    if not updated:
        raise AppError("Can only review pending leave requests", code=ErrorCode.NOT_PENDING)

    await session.refresh(leave_request)

    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.LEAVE_REQUEST,
        entity_id=leave_request.id,
        action=AuditAction.APPROVE if target == LeaveStatus.APPROVED else AuditAction.REJECT,
        before_json=before_dict,
        after_json=model_to_audit_dict(leave_request),
    )

    await session.commit()
    await session.refresh(leave_request)
    logger.info("Leave request %s %s by %s", leave_request.id, target.value.lower(), auth.user_id)

    event_type = NotificationType.LEAVE_APPROVED if target == LeaveStatus.APPROVED else NotificationType.LEAVE_REJECTED
    await dispatch_notification([leave_request.user_id], build_notification(event_type, leave_request))

    return build_leave_request_response(leave_request)


async def cancel_leave_request(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
) -> LeaveRequestResponse:
    """Cancel a request owned by the caller. Any status except CANCELLED may be cancelled."""
    leave_request = await _get_leave_request_or_404(session, request_id)

    await _ensure_owner(auth, leave_request, "cancel")

    if not LeaveStatus(leave_request.status).can_transition_to(LeaveStatus.CANCELLED):
        raise AppError("Leave request is already cancelled", code=ErrorCode.ALREADY_CANCELLED)

    before_dict = model_to_audit_dict(leave_request)
    previous_status = leave_request.status

    updated = await _compare_and_set(
        session,
        leave_request.id,
        col(LeaveRequest.status) != LeaveStatus.CANCELLED.value,
        {"status": LeaveStatus.CANCELLED.value},
    )
    if not updated:
        raise AppError("Leave request is already cancelled", code=ErrorCode.ALREADY_CANCELLED)

    await session.refresh(leave_request)

    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.LEAVE_REQUEST,
        entity_id=leave_request.id,
        action=AuditAction.CANCEL,
        before_json=before_dict,
        after_json=model_to_audit_dict(leave_request),
    )

    await session.commit()
    await session.refresh(leave_request)
    logger.info("Leave request %s cancelled (was %s)", leave_request.id, previous_status)

    reviewers = await get_employee_service().list_reviewer_user_ids()
    await dispatch_notification(reviewers, build_notification(NotificationType.LEAVE_CANCELLED, leave_request))

    return build_leave_request_response(leave_request)


async def get_leave_request(session: AsyncSession, request_id: uuid.UUID) -> LeaveRequestResponse:
    """Get a single leave request by ID."""
    leave_request = await _get_leave_request_or_404(session, request_id)
    return build_leave_request_response(leave_request)


async def list_leave_requests(
    session: AsyncSession,
    employee_id: uuid.UUID | None = None,
    status_filter: LeaveStatus | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    offset: int = 0,
    limit: int = 50,
) -> LeaveRequestListResponse:
    """List leave requests, newest first.

    ``start_date``/``end_date`` bound the request's start date, inclusively.
    """
    base_filters = []

    if employee_id is not None:
        base_filters.append(col(LeaveRequest.employee_id) == employee_id)
    if status_filter is not None:
        base_filters.append(col(LeaveRequest.status) == status_filter.value)
    if start_date is not None:
        base_filters.append(col(LeaveRequest.start_date) >= start_date)
    if end_date is not None:
        base_filters.append(col(LeaveRequest.start_date) <= end_date)

    count_result = await session.execute(select(func.count()).select_from(LeaveRequest).where(*base_filters))
    total = count_result.scalar_one()

    result = await session.execute(
        select(LeaveRequest)
        .where(*base_filters)
        .order_by(col(LeaveRequest.created_at).desc())
        .offset(offset)
        .limit(limit)
    )
    leave_requests = list(result.scalars().all())

    return LeaveRequestListResponse(
        items=[build_leave_request_response(r) for r in leave_requests],
        total=total,
    )


async def list_my_leave_requests(
    session: AsyncSession,
    auth: AuthContext,
    offset: int = 0,
    limit: int = 50,
) -> LeaveRequestListResponse:
    """List the caller's own leave requests."""
    employee = await _get_caller_employee(auth)
    return await list_leave_requests(session, employee_id=employee.id, offset=offset, limit=limit)


async def list_pending_leave_requests(session: AsyncSession) -> LeaveRequestListResponse:
    """All PENDING requests, oldest first, for the review queue."""
    result = await session.execute(
        select(LeaveRequest)
        .where(col(LeaveRequest.status) == LeaveStatus.PENDING.value)
        .order_by(col(LeaveRequest.created_at))
    )
    leave_requests = list(result.scalars().all())
    return LeaveRequestListResponse(
        items=[build_leave_request_response(r) for r in leave_requests],
        total=len(leave_requests),
    )
