# ruff: noqa: TC003
from __future__ import annotations

import uuid
from typing import Protocol, runtime_checkable

from pydantic import BaseModel

from leavedesk.config import get_settings


class EmployeeInfo(BaseModel):
    """Employee metadata from the Employee Service."""

    id: uuid.UUID
    user_id: uuid.UUID
    first_name: str
    last_name: str
    email: str
    role: str = "employee"


@runtime_checkable
class EmployeeService(Protocol):
    """Interface for the Employee Service."""

    async def get_employee(self, employee_id: uuid.UUID) -> EmployeeInfo | None:
        """Fetch employee metadata. Returns None if not found."""
        ...

    async def get_employee_by_user(self, user_id: uuid.UUID) -> EmployeeInfo | None:
        """Fetch the employee record linked to a user. Returns None if not found."""
        ...

    async def list_reviewer_user_ids(self) -> list[uuid.UUID]:
        """User ids allowed to review leave requests."""
        ...

    async def list_employees(self) -> list[EmployeeInfo]:
        """List all employees."""
        ...


class InMemoryEmployeeService:
    """In-memory stub implementation for development."""

    def __init__(self, reviewer_roles: tuple[str, ...] | None = None) -> None:
        self._employees: dict[uuid.UUID, EmployeeInfo] = {}
        # Reviewers are the same roles that pass the review permission check.
        self._reviewer_roles = reviewer_roles if reviewer_roles is not None else tuple(get_settings().privileged_roles)

    def seed(self, employee: EmployeeInfo) -> None:
        """Seed an employee for testing."""
        self._employees[employee.id] = employee

    async def get_employee(self, employee_id: uuid.UUID) -> EmployeeInfo | None:
        """Fetch employee metadata. Returns None if not found."""
        return self._employees.get(employee_id)

    async def get_employee_by_user(self, user_id: uuid.UUID) -> EmployeeInfo | None:
        """Fetch the employee record linked to a user. Returns None if not found."""
        for employee in self._employees.values():
            if employee.user_id == user_id:
                return employee
        return None

    async def list_reviewer_user_ids(self) -> list[uuid.UUID]:
        """User ids allowed to review leave requests."""
        return [e.user_id for e in self._employees.values() if e.role in self._reviewer_roles]

    async def list_employees(self) -> list[EmployeeInfo]:
        """List all employees ordered by last name."""
        return sorted(self._employees.values(), key=lambda e: (e.last_name, e.first_name))


_employee_service: EmployeeService = InMemoryEmployeeService()


def get_employee_service() -> EmployeeService:
    """FastAPI dependency for the Employee Service."""
    return _employee_service


def set_employee_service(service: EmployeeService) -> None:
    """Override the service (for testing or production wiring)."""
    global _employee_service
    _employee_service = service
