# ruff: noqa: TC001
from __future__ import annotations

from fastapi import APIRouter

from leavedesk.api.deps import AuthDep, ReviewerDep
from leavedesk.db import SessionDep
from leavedesk.schemas.company_settings import AllowanceSettingsPayload, AllowanceSettingsResponse
from leavedesk.services import allowance as allowance_service

settings_router = APIRouter(prefix="/settings", tags=["settings"])


@settings_router.get("/leave-allowance", response_model=AllowanceSettingsResponse)
async def get_leave_allowance(
    session: SessionDep,
    auth: AuthDep,
) -> AllowanceSettingsResponse:
    """Get the effective annual leave allowance."""
    return await allowance_service.get_allowance_settings(session)


@settings_router.put("/leave-allowance", response_model=AllowanceSettingsResponse)
async def set_leave_allowance(
    payload: AllowanceSettingsPayload,
    session: SessionDep,
    auth: ReviewerDep,
) -> AllowanceSettingsResponse:
    """Set or clear the annual leave allowance (admin/HR only)."""
    return await allowance_service.set_annual_allowance(session, auth, payload)
