from __future__ import annotations

from pydantic import BaseModel, Field


class AllowanceSettingsPayload(BaseModel):
    """Request body for setting the organization's annual allowance.

    ``None`` clears the explicit value so the configured fallback applies.
    """

    annual_leave_allowance_days: int | None = Field(default=None, ge=0, le=366)


class AllowanceSettingsResponse(BaseModel):
    """The effective annual allowance and where it came from."""

    annual_leave_allowance_days: int
    is_default: bool
