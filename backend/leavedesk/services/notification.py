# ruff: noqa: TC003
from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from pydantic import BaseModel

from leavedesk.models.enums import LeaveType, NotificationType

if TYPE_CHECKING:
    from leavedesk.models.leave_request import LeaveRequest

logger = logging.getLogger(__name__)


class LeaveNotification(BaseModel):
    """Payload describing a leave lifecycle event."""

    type: NotificationType
    leave_request_id: uuid.UUID
    employee_id: uuid.UUID
    leave_type: LeaveType
    start_date: date
    end_date: date
    total_days: int
    rejection_reason: str | None = None


@runtime_checkable
class NotificationSink(Protocol):
    """Interface for delivering leave notifications."""

    async def notify(self, user_ids: list[uuid.UUID], event: LeaveNotification) -> None:
        """Deliver ``event`` to every user in ``user_ids``."""
        ...


class InMemoryNotificationSink:
    """Collects notifications in memory. Used in development and tests."""

    def __init__(self) -> None:
        self.sent: list[tuple[list[uuid.UUID], LeaveNotification]] = []

    async def notify(self, user_ids: list[uuid.UUID], event: LeaveNotification) -> None:
        """Record the notification."""
        self.sent.append((list(user_ids), event))


class LoggingNotificationSink:
    """Writes notifications to the application log."""

    async def notify(self, user_ids: list[uuid.UUID], event: LeaveNotification) -> None:
        """Log the notification at INFO level."""
        logger.info(
            "Notification %s for leave request %s to %d recipient(s)",
            event.type,
            event.leave_request_id,
            len(user_ids),
        )


_notification_sink: NotificationSink = LoggingNotificationSink()


def get_notification_sink() -> NotificationSink:
    """Return the configured notification sink."""
    return _notification_sink


def set_notification_sink(sink: NotificationSink) -> None:
    """Override the sink (for testing or production wiring)."""
    global _notification_sink
    _notification_sink = sink


def build_notification(
    event_type: NotificationType,
    leave_request: LeaveRequest,
) -> LeaveNotification:
    """Build the notification payload for a leave request."""
    return LeaveNotification(
        type=event_type,
        leave_request_id=leave_request.id,
        employee_id=leave_request.employee_id,
        leave_type=LeaveType(leave_request.type),
        start_date=leave_request.start_date,
        end_date=leave_request.end_date,
        total_days=leave_request.total_days,
        rejection_reason=leave_request.rejection_reason,
    )


async def dispatch_notification(user_ids: list[uuid.UUID], event: LeaveNotification) -> None:
    """Fire-and-forget delivery. Sink failures are logged and never propagate."""
    if not user_ids:
        return
    try:
        await get_notification_sink().notify(user_ids, event)
    except Exception:
        logger.exception("Failed to deliver %s for leave request %s", event.type, event.leave_request_id)
