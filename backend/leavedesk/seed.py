"""Seed script for development data.

Run with:  python -m leavedesk.seed
The API must be running; employees live in the in-memory stub, so re-run
after every API restart.
"""

from __future__ import annotations

import asyncio
import sys
from datetime import date, timedelta

import httpx

BASE_URL = "http://localhost:8000"
ADMIN_USER_ID = "00000000-0000-0000-0000-000000000001"

HEADERS = {
    "Content-Type": "application/json",
    "X-User-Id": ADMIN_USER_ID,
    "X-Role": "admin",
}

# Well-known UUIDs: employee ids end in 1xx, their user ids in 0xx.
ADMIN_EMPLOYEE_ID = "00000000-0000-0000-0000-000000000101"
ALICE_ID = "00000000-0000-0000-0000-000000000102"
ALICE_USER_ID = "00000000-0000-0000-0000-000000000002"
BOB_ID = "00000000-0000-0000-0000-000000000103"
BOB_USER_ID = "00000000-0000-0000-0000-000000000003"

EMPLOYEES = [
    {
        "id": ADMIN_EMPLOYEE_ID,
        "user_id": ADMIN_USER_ID,
        "first_name": "Hana",
        "last_name": "Reyes",
        "email": "hana.reyes@example.com",
        "role": "hr",
    },
    {
        "id": ALICE_ID,
        "user_id": ALICE_USER_ID,
        "first_name": "Alice",
        "last_name": "Johnson",
        "email": "alice.johnson@example.com",
        "role": "employee",
    },
    {
        "id": BOB_ID,
        "user_id": BOB_USER_ID,
        "first_name": "Bob",
        "last_name": "Smith",
        "email": "bob.smith@example.com",
        "role": "employee",
    },
]

ANNUAL_ALLOWANCE_DAYS = 22


def _employee_headers(user_id: str) -> dict[str, str]:
    return {"Content-Type": "application/json", "X-User-Id": user_id, "X-Role": "employee"}


def _next_business_day(start: date, days_ahead: int) -> date:
    """First Mon-Fri on or after ``start + days_ahead``."""
    candidate = start + timedelta(days=days_ahead)
    while candidate.weekday() >= 5:
        candidate += timedelta(days=1)
    return candidate


def _holidays(year: int) -> list[dict[str, str]]:
    return [
        {"date": f"{year}-01-01", "name": "New Year's Day"},
        {"date": f"{year}-05-01", "name": "Labour Day"},
        {"date": f"{year}-12-25", "name": "Christmas Day"},
    ]


async def _safe_post(
    client: httpx.AsyncClient,
    url: str,
    json: dict,
    label: str,
    headers: dict[str, str] | None = None,
) -> dict | None:
    """POST with 409-conflict tolerance so the script can be re-run."""
    resp = await client.post(url, json=json, headers=headers or HEADERS)
    if resp.status_code in (200, 201):
        print(f"  [OK] {label}")
        return resp.json()
    if resp.status_code in (400, 409):
        print(f"  [SKIP] {label}: {resp.json().get('detail')}")
        return None
    print(f"  [ERROR] {label}: {resp.status_code} {resp.text[:200]}")
    return None


async def seed_employees(client: httpx.AsyncClient) -> None:
    """Seed employees via PUT (upsert)."""
    print("\n--- Seeding employees ---")
    for emp in EMPLOYEES:
        body = {k: v for k, v in emp.items() if k != "id"}
        resp = await client.put(f"{BASE_URL}/employees/{emp['id']}", json=body, headers=HEADERS)
        status = "OK" if resp.status_code == 200 else f"ERROR {resp.status_code}"
        print(f"  [{status}] {emp['first_name']} {emp['last_name']}")


async def seed_allowance(client: httpx.AsyncClient) -> None:
    """Set the organization's annual allowance."""
    print("\n--- Seeding allowance ---")
    resp = await client.put(
        f"{BASE_URL}/settings/leave-allowance",
        json={"annual_leave_allowance_days": ANNUAL_ALLOWANCE_DAYS},
        headers=HEADERS,
    )
    print(f"  [{'OK' if resp.status_code == 200 else resp.status_code}] {ANNUAL_ALLOWANCE_DAYS} day(s) per year")


async def seed_holidays(client: httpx.AsyncClient, year: int) -> None:
    """Seed holidays for the current and next year."""
    print("\n--- Seeding holidays ---")
    for holiday in _holidays(year) + _holidays(year + 1):
        await _safe_post(client, f"{BASE_URL}/holidays", holiday, f"Holiday: {holiday['date']} {holiday['name']}")


async def seed_leave_requests(client: httpx.AsyncClient) -> None:
    """Seed one pending and one approved request."""
    print("\n--- Seeding leave requests ---")
    today = date.today()

    alice_start = _next_business_day(today, 14)
    await _safe_post(
        client,
        f"{BASE_URL}/leave-requests",
        {
            "type": "ANNUAL",
            "start_date": alice_start.isoformat(),
            "end_date": _next_business_day(alice_start, 2).isoformat(),
            "total_days": 3,
            "reason": "Family vacation",
        },
        "Request: Alice 3-day annual leave (PENDING)",
        headers=_employee_headers(ALICE_USER_ID),
    )

    bob_day = _next_business_day(today, 7)
    result = await _safe_post(
        client,
        f"{BASE_URL}/leave-requests",
        {
            "type": "PERSONAL",
            "start_date": bob_day.isoformat(),
            "end_date": bob_day.isoformat(),
            "total_days": 1,
            "reason": "Moving house",
        },
        "Request: Bob 1-day personal leave",
        headers=_employee_headers(BOB_USER_ID),
    )
    if result:
        await _safe_post(
            client,
            f"{BASE_URL}/leave-requests/{result['id']}/approve",
            {"status": "APPROVED"},
            "Approve Bob's personal leave",
        )


async def main() -> None:
    print("=" * 60)
    print("  Leave Desk: Development Seed Script")
    print("=" * 60)

    async with httpx.AsyncClient(timeout=30.0) as client:
        try:
            resp = await client.get(f"{BASE_URL}/health")
            if resp.status_code != 200:
                print(f"API health check failed: {resp.status_code}")
                sys.exit(1)
            print("\n[OK] API is healthy")
        except httpx.ConnectError:
            print("ERROR: Cannot connect to API at", BASE_URL)
            sys.exit(1)

        await seed_employees(client)
        await seed_allowance(client)
        await seed_holidays(client, date.today().year)
        await seed_leave_requests(client)

    print("\n" + "=" * 60)
    print("  Seeding complete!")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
