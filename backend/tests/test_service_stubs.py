"""Tests for the Employee service stub."""

from __future__ import annotations

import uuid

import pytest

from leavedesk.config import get_settings
from leavedesk.services.employee import (
    EmployeeInfo,
    EmployeeService,
    InMemoryEmployeeService,
    get_employee_service,
    set_employee_service,
)


def _make_employee(name: str = "Jane", role: str = "employee") -> EmployeeInfo:
    return EmployeeInfo(
        id=uuid.uuid4(),
        user_id=uuid.uuid4(),
        first_name=name,
        last_name="Doe",
        email=f"{name.lower()}@example.com",
        role=role,
    )


async def test_employee_service_get_not_found() -> None:
    svc = InMemoryEmployeeService()
    assert await svc.get_employee(uuid.uuid4()) is None


async def test_employee_service_seed_and_get() -> None:
    svc = InMemoryEmployeeService()
    emp = _make_employee()
    svc.seed(emp)
    result = await svc.get_employee(emp.id)
    assert result is not None
    assert result.id == emp.id


async def test_employee_service_get_by_user() -> None:
    svc = InMemoryEmployeeService()
    emp = _make_employee()
    svc.seed(emp)
    result = await svc.get_employee_by_user(emp.user_id)
    assert result is not None
    assert result.id == emp.id
    assert await svc.get_employee_by_user(uuid.uuid4()) is None


async def test_employee_service_reviewers() -> None:
    svc = InMemoryEmployeeService()
    hr = _make_employee("Hana", role="hr")
    admin = _make_employee("Ada", role="admin")
    svc.seed(hr)
    svc.seed(admin)
    svc.seed(_make_employee("Eli"))

    reviewers = await svc.list_reviewer_user_ids()
    assert set(reviewers) == {hr.user_id, admin.user_id}


async def test_employee_service_custom_reviewer_roles() -> None:
    svc = InMemoryEmployeeService(reviewer_roles=("admin",))
    svc.seed(_make_employee("Hana", role="hr"))
    assert await svc.list_reviewer_user_ids() == []


async def test_employee_service_reviewers_follow_privileged_roles(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(get_settings(), "privileged_roles", ["manager"])
    svc = InMemoryEmployeeService()
    manager = _make_employee("Mira", role="manager")
    svc.seed(manager)
    svc.seed(_make_employee("Hana", role="hr"))
    svc.seed(_make_employee("Ada", role="admin"))

    assert await svc.list_reviewer_user_ids() == [manager.user_id]


async def test_employee_service_list_empty() -> None:
    svc = InMemoryEmployeeService()
    assert await svc.list_employees() == []


def test_in_memory_service_satisfies_protocol() -> None:
    assert isinstance(InMemoryEmployeeService(), EmployeeService)


def test_set_employee_service_swaps_singleton() -> None:
    previous = get_employee_service()
    replacement = InMemoryEmployeeService()
    set_employee_service(replacement)
    try:
        assert get_employee_service() is replacement
    finally:
        set_employee_service(previous)
