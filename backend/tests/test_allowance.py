"""Tests for the organization-wide annual allowance setting."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from leavedesk.config import get_settings
from leavedesk.models.audit import AuditLog
from leavedesk.models.company_settings import CompanySettings
from leavedesk.services.allowance import get_annual_allowance

if TYPE_CHECKING:
    from httpx import AsyncClient
    from sqlalchemy.ext.asyncio import AsyncSession

HR_USER_ID = uuid.uuid4()
HR_HEADERS = {"X-User-Id": str(HR_USER_ID), "X-Role": "hr"}
EMPLOYEE_HEADERS = {"X-User-Id": str(uuid.uuid4()), "X-Role": "employee"}
URL = "/settings/leave-allowance"


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------


async def test_fallback_when_no_settings_row(db_session: AsyncSession) -> None:
    assert await get_annual_allowance(db_session) == get_settings().fallback_annual_leave_allowance_days


async def test_fallback_when_setting_is_null(db_session: AsyncSession) -> None:
    db_session.add(CompanySettings(annual_leave_allowance_days=None))
    await db_session.commit()
    assert await get_annual_allowance(db_session) == 20


async def test_explicit_setting_wins(db_session: AsyncSession) -> None:
    db_session.add(CompanySettings(annual_leave_allowance_days=25))
    await db_session.commit()
    assert await get_annual_allowance(db_session) == 25


async def test_explicit_zero_is_respected(db_session: AsyncSession) -> None:
    db_session.add(CompanySettings(annual_leave_allowance_days=0))
    await db_session.commit()
    assert await get_annual_allowance(db_session) == 0


# ---------------------------------------------------------------------------
# API
# ---------------------------------------------------------------------------


async def test_get_default_allowance(async_client: AsyncClient) -> None:
    resp = await async_client.get(URL, headers=EMPLOYEE_HEADERS)
    assert resp.status_code == 200
    assert resp.json() == {"annual_leave_allowance_days": 20, "is_default": True}


async def test_set_allowance(async_client: AsyncClient) -> None:
    resp = await async_client.put(URL, json={"annual_leave_allowance_days": 25}, headers=HR_HEADERS)
    assert resp.status_code == 200
    assert resp.json() == {"annual_leave_allowance_days": 25, "is_default": False}

    resp = await async_client.get(URL, headers=EMPLOYEE_HEADERS)
    assert resp.json()["annual_leave_allowance_days"] == 25


async def test_update_existing_allowance(async_client: AsyncClient, db_session: AsyncSession) -> None:
    await async_client.put(URL, json={"annual_leave_allowance_days": 25}, headers=HR_HEADERS)
    resp = await async_client.put(URL, json={"annual_leave_allowance_days": 30}, headers=HR_HEADERS)
    assert resp.json()["annual_leave_allowance_days"] == 30

    result = await db_session.execute(select(CompanySettings))
    assert len(result.scalars().all()) == 1


async def test_clear_allowance_restores_fallback(async_client: AsyncClient) -> None:
    await async_client.put(URL, json={"annual_leave_allowance_days": 25}, headers=HR_HEADERS)
    resp = await async_client.put(URL, json={"annual_leave_allowance_days": None}, headers=HR_HEADERS)
    assert resp.json() == {"annual_leave_allowance_days": 20, "is_default": True}


async def test_set_allowance_requires_reviewer(async_client: AsyncClient) -> None:
    resp = await async_client.put(URL, json={"annual_leave_allowance_days": 25}, headers=EMPLOYEE_HEADERS)
    assert resp.status_code == 403
    assert resp.json()["code"] == "FORBIDDEN"


async def test_negative_allowance_is_rejected(async_client: AsyncClient) -> None:
    resp = await async_client.put(URL, json={"annual_leave_allowance_days": -1}, headers=HR_HEADERS)
    assert resp.status_code == 422


async def test_set_allowance_is_audited(async_client: AsyncClient, db_session: AsyncSession) -> None:
    await async_client.put(URL, json={"annual_leave_allowance_days": 25}, headers=HR_HEADERS)
    await async_client.put(URL, json={"annual_leave_allowance_days": 15}, headers=HR_HEADERS)

    result = await db_session.execute(
        select(AuditLog)
        .where(col(AuditLog.entity_type) == "COMPANY_SETTINGS")
        .order_by(col(AuditLog.created_at))
    )
    entries = list(result.scalars().all())
    assert [e.action for e in entries] == ["CREATE", "UPDATE"]
    assert entries[1].before_json["annual_leave_allowance_days"] == 25
    assert entries[1].after_json["annual_leave_allowance_days"] == 15
    assert entries[1].actor_id == HR_USER_ID
