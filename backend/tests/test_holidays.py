"""Integration tests for holiday CRUD API, authorization, and audit."""

from __future__ import annotations

import uuid
from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from leavedesk.models.audit import AuditLog
from leavedesk.models.holiday import Holiday
from leavedesk.services.holiday import holidays_between

if TYPE_CHECKING:
    from httpx import AsyncClient
    from sqlalchemy.ext.asyncio import AsyncSession

USER_ID = uuid.uuid4()
AUTH_HEADERS = {"X-User-Id": str(USER_ID), "X-Role": "admin"}
EMPLOYEE_HEADERS = {"X-User-Id": str(USER_ID), "X-Role": "employee"}
BASE_URL = "/holidays"


def _holiday_payload(date: str = "2099-07-04", name: str = "Independence Day") -> dict:
    return {"date": date, "name": name}


# ---------------------------------------------------------------------------
# Create holiday tests
# ---------------------------------------------------------------------------


async def test_create_holiday(async_client: AsyncClient) -> None:
    resp = await async_client.post(BASE_URL, json=_holiday_payload(), headers=AUTH_HEADERS)
    assert resp.status_code == 201
    data = resp.json()
    assert data["date"] == "2099-07-04"
    assert data["name"] == "Independence Day"
    assert "id" in data


async def test_create_duplicate_holiday_returns_409(async_client: AsyncClient) -> None:
    await async_client.post(BASE_URL, json=_holiday_payload(), headers=AUTH_HEADERS)
    resp = await async_client.post(BASE_URL, json=_holiday_payload(name="Again"), headers=AUTH_HEADERS)
    assert resp.status_code == 409


async def test_create_holiday_requires_name(async_client: AsyncClient) -> None:
    resp = await async_client.post(BASE_URL, json=_holiday_payload(name=""), headers=AUTH_HEADERS)
    assert resp.status_code == 422


async def test_employee_cannot_create_holiday(async_client: AsyncClient) -> None:
    resp = await async_client.post(BASE_URL, json=_holiday_payload(), headers=EMPLOYEE_HEADERS)
    assert resp.status_code == 403


# ---------------------------------------------------------------------------
# List holiday tests
# ---------------------------------------------------------------------------


async def test_list_holidays_empty(async_client: AsyncClient) -> None:
    resp = await async_client.get(BASE_URL, headers=EMPLOYEE_HEADERS)
    assert resp.status_code == 200
    data = resp.json()
    assert data["items"] == []
    assert data["total"] == 0


async def test_list_holidays_year_filter(async_client: AsyncClient) -> None:
    await async_client.post(BASE_URL, json=_holiday_payload("2099-12-25", "Christmas 2099"), headers=AUTH_HEADERS)
    await async_client.post(BASE_URL, json=_holiday_payload("2100-01-01", "New Year 2100"), headers=AUTH_HEADERS)

    resp = await async_client.get(f"{BASE_URL}?year=2099", headers=EMPLOYEE_HEADERS)
    data = resp.json()
    assert data["total"] == 1
    assert data["items"][0]["date"] == "2099-12-25"

    resp = await async_client.get(BASE_URL, headers=EMPLOYEE_HEADERS)
    assert resp.json()["total"] == 2


async def test_list_holidays_ordered_by_date(async_client: AsyncClient) -> None:
    await async_client.post(BASE_URL, json=_holiday_payload("2099-12-25", "Christmas"), headers=AUTH_HEADERS)
    await async_client.post(BASE_URL, json=_holiday_payload("2099-01-01", "New Year"), headers=AUTH_HEADERS)

    resp = await async_client.get(BASE_URL, headers=EMPLOYEE_HEADERS)
    assert [h["date"] for h in resp.json()["items"]] == ["2099-01-01", "2099-12-25"]


async def test_list_holidays_pagination(async_client: AsyncClient) -> None:
    for i in range(3):
        await async_client.post(
            BASE_URL,
            json=_holiday_payload(f"2099-0{i + 1}-01", f"Holiday {i}"),
            headers=AUTH_HEADERS,
        )

    resp = await async_client.get(f"{BASE_URL}?offset=0&limit=2", headers=EMPLOYEE_HEADERS)
    data = resp.json()
    assert data["total"] == 3
    assert len(data["items"]) == 2

    resp = await async_client.get(f"{BASE_URL}?offset=2&limit=2", headers=EMPLOYEE_HEADERS)
    assert len(resp.json()["items"]) == 1


# ---------------------------------------------------------------------------
# Delete holiday tests
# ---------------------------------------------------------------------------


async def test_delete_holiday(async_client: AsyncClient) -> None:
    create_resp = await async_client.post(BASE_URL, json=_holiday_payload(), headers=AUTH_HEADERS)
    holiday_id = create_resp.json()["id"]

    resp = await async_client.delete(f"{BASE_URL}/{holiday_id}", headers=AUTH_HEADERS)
    assert resp.status_code == 204

    list_resp = await async_client.get(BASE_URL, headers=AUTH_HEADERS)
    assert list_resp.json()["total"] == 0


async def test_delete_unknown_holiday_returns_404(async_client: AsyncClient) -> None:
    resp = await async_client.delete(f"{BASE_URL}/{uuid.uuid4()}", headers=AUTH_HEADERS)
    assert resp.status_code == 404
    assert resp.json()["code"] == "NOT_FOUND"


async def test_employee_cannot_delete_holiday(async_client: AsyncClient) -> None:
    create_resp = await async_client.post(BASE_URL, json=_holiday_payload(), headers=AUTH_HEADERS)
    holiday_id = create_resp.json()["id"]

    resp = await async_client.delete(f"{BASE_URL}/{holiday_id}", headers=EMPLOYEE_HEADERS)
    assert resp.status_code == 403


# ---------------------------------------------------------------------------
# Audit
# ---------------------------------------------------------------------------


async def test_holiday_create_and_delete_are_audited(async_client: AsyncClient, db_session: AsyncSession) -> None:
    create_resp = await async_client.post(BASE_URL, json=_holiday_payload(), headers=AUTH_HEADERS)
    holiday_id = uuid.UUID(create_resp.json()["id"])
    await async_client.delete(f"{BASE_URL}/{holiday_id}", headers=AUTH_HEADERS)

    result = await db_session.execute(
        select(AuditLog).where(col(AuditLog.entity_id) == holiday_id).order_by(col(AuditLog.created_at))
    )
    entries = list(result.scalars().all())
    assert [e.action for e in entries] == ["CREATE", "DELETE"]
    assert entries[0].after_json["name"] == "Independence Day"
    assert entries[1].before_json["date"] == "2099-07-04"


# ---------------------------------------------------------------------------
# Calendar provider
# ---------------------------------------------------------------------------


async def test_holidays_between_is_inclusive(db_session: AsyncSession) -> None:
    db_session.add(Holiday(date=date(2099, 1, 1), name="New Year"))
    db_session.add(Holiday(date=date(2099, 1, 6), name="Epiphany"))
    db_session.add(Holiday(date=date(2099, 2, 1), name="Later"))
    await db_session.commit()

    result = await holidays_between(db_session, date(2099, 1, 1), date(2099, 1, 6))
    assert result == {date(2099, 1, 1), date(2099, 1, 6)}


async def test_holidays_between_empty(db_session: AsyncSession) -> None:
    assert await holidays_between(db_session, date(2099, 1, 1), date(2099, 12, 31)) == set()
