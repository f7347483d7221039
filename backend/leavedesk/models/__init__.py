from sqlmodel import SQLModel

from leavedesk.models.audit import AuditLog
from leavedesk.models.base import TimestampMixin, UUIDBase
from leavedesk.models.company_settings import CompanySettings
from leavedesk.models.enums import (
    AuditAction,
    AuditEntityType,
    LeaveStatus,
    LeaveType,
    NotificationType,
)
from leavedesk.models.holiday import Holiday
from leavedesk.models.leave_request import LeaveRequest

__all__ = [
    "AuditAction",
    "AuditEntityType",
    "AuditLog",
    "CompanySettings",
    "Holiday",
    "LeaveRequest",
    "LeaveStatus",
    "LeaveType",
    "NotificationType",
    "SQLModel",
    "TimestampMixin",
    "UUIDBase",
]
