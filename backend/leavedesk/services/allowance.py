from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from leavedesk.config import get_settings
from leavedesk.models.company_settings import CompanySettings
from leavedesk.models.enums import AuditAction, AuditEntityType
from leavedesk.schemas.company_settings import AllowanceSettingsResponse
from leavedesk.services.audit import model_to_audit_dict, write_audit_log

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from leavedesk.schemas.auth import AuthContext
    from leavedesk.schemas.company_settings import AllowanceSettingsPayload

logger = logging.getLogger(__name__)


async def _get_company_settings(session: AsyncSession) -> CompanySettings | None:
    result = await session.execute(select(CompanySettings).order_by(col(CompanySettings.created_at)).limit(1))
    return result.scalar_one_or_none()


async def get_annual_allowance(session: AsyncSession) -> int:
    """Return the organization's annual leave allowance in days.

    An explicit value in company settings wins; otherwise the configured
    fallback applies.
    """
    company_settings = await _get_company_settings(session)
    if company_settings is not None and company_settings.annual_leave_allowance_days is not None:
        return company_settings.annual_leave_allowance_days
    return get_settings().fallback_annual_leave_allowance_days


async def get_allowance_settings(session: AsyncSession) -> AllowanceSettingsResponse:
    """Return the effective allowance along with whether it is the fallback."""
    company_settings = await _get_company_settings(session)
    if company_settings is not None and company_settings.annual_leave_allowance_days is not None:
        return AllowanceSettingsResponse(
            annual_leave_allowance_days=company_settings.annual_leave_allowance_days,
            is_default=False,
        )
    return AllowanceSettingsResponse(
        annual_leave_allowance_days=get_settings().fallback_annual_leave_allowance_days,
        is_default=True,
    )


async def set_annual_allowance(
    session: AsyncSession,
    auth: AuthContext,
    payload: AllowanceSettingsPayload,
) -> AllowanceSettingsResponse:
    """Set or clear the explicit annual allowance."""
    company_settings = await _get_company_settings(session)
    before_dict = None
    action = AuditAction.UPDATE

    if company_settings is None:
        company_settings = CompanySettings(annual_leave_allowance_days=payload.annual_leave_allowance_days)
        session.add(company_settings)
        action = AuditAction.CREATE
    else:
        before_dict = model_to_audit_dict(company_settings)
        company_settings.annual_leave_allowance_days = payload.annual_leave_allowance_days

    await session.flush()

    await write_audit_log(
        session,
        actor_id=auth.user_id,
        entity_type=AuditEntityType.COMPANY_SETTINGS,
        entity_id=company_settings.id,
        action=action,
        before_json=before_dict,
        after_json=model_to_audit_dict(company_settings),
    )

    await session.commit()
    logger.info("Annual leave allowance set to %s by %s", payload.annual_leave_allowance_days, auth.user_id)
    return await get_allowance_settings(session)
