from __future__ import annotations

import enum


class LeaveType(enum.StrEnum):
    """Kind of leave being requested."""

    ANNUAL = "ANNUAL"
    SICK = "SICK"
    PERSONAL = "PERSONAL"
    UNPAID = "UNPAID"
    MATERNITY = "MATERNITY"
    PATERNITY = "PATERNITY"
    BEREAVEMENT = "BEREAVEMENT"

    @property
    def counts_against_allowance(self) -> bool:
        """Sick leave never consumes or constrains the annual allowance."""
        return self is not LeaveType.SICK


class LeaveStatus(enum.StrEnum):
    """State machine for leave requests."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"

    def can_transition_to(self, target: LeaveStatus) -> bool:
        """Return True if moving from this status to ``target`` is allowed."""
        return target in _TRANSITIONS[self]


_TRANSITIONS: dict[LeaveStatus, frozenset[LeaveStatus]] = {
    LeaveStatus.PENDING: frozenset({LeaveStatus.APPROVED, LeaveStatus.REJECTED, LeaveStatus.CANCELLED}),
    LeaveStatus.APPROVED: frozenset({LeaveStatus.CANCELLED}),
    LeaveStatus.REJECTED: frozenset({LeaveStatus.CANCELLED}),
    LeaveStatus.CANCELLED: frozenset(),
}

# Statuses that hold a slot on the calendar and count toward committed usage.
ACTIVE_STATUSES: tuple[LeaveStatus, ...] = (LeaveStatus.PENDING, LeaveStatus.APPROVED)


class AuditEntityType(enum.StrEnum):
    """Entity type recorded in the audit log."""

    LEAVE_REQUEST = "LEAVE_REQUEST"
    HOLIDAY = "HOLIDAY"
    COMPANY_SETTINGS = "COMPANY_SETTINGS"


class AuditAction(enum.StrEnum):
    """Action recorded in the audit log."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    APPROVE = "APPROVE"
    REJECT = "REJECT"
    CANCEL = "CANCEL"


class NotificationType(enum.StrEnum):
    """Leave events pushed to the notification sink."""

    LEAVE_REQUESTED = "LEAVE_REQUESTED"
    LEAVE_APPROVED = "LEAVE_APPROVED"
    LEAVE_REJECTED = "LEAVE_REJECTED"
    LEAVE_CANCELLED = "LEAVE_CANCELLED"
