from __future__ import annotations

from sqlmodel import Field

from leavedesk.models.base import TimestampMixin, UUIDBase


class CompanySettings(UUIDBase, TimestampMixin, table=True):
    """Organization-wide settings. A single row is expected."""

    __tablename__ = "company_settings"

    annual_leave_allowance_days: int | None = Field(default=None, ge=0)
