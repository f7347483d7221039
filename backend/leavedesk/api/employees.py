# ruff: noqa: TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter

from leavedesk.api.deps import AuthDep, ReviewerDep
from leavedesk.exceptions import AppError, ErrorCode
from leavedesk.schemas.employee import EmployeeListResponse, EmployeeResponse, UpsertEmployeeRequest
from leavedesk.services.employee import EmployeeInfo, get_employee_service

employees_router = APIRouter(prefix="/employees", tags=["employees"])


def _build_employee_response(employee: EmployeeInfo) -> EmployeeResponse:
    return EmployeeResponse(
        id=employee.id,
        user_id=employee.user_id,
        first_name=employee.first_name,
        last_name=employee.last_name,
        email=employee.email,
        role=employee.role,
    )


@employees_router.put("/{employee_id}", response_model=EmployeeResponse)
async def upsert_employee(
    employee_id: uuid.UUID,
    payload: UpsertEmployeeRequest,
    auth: ReviewerDep,
) -> EmployeeResponse:
    """Create or update an employee in the stub service (admin/HR only)."""
    employee = EmployeeInfo(id=employee_id, **payload.model_dump())
    get_employee_service().seed(employee)  # ty: ignore[unresolved-attribute]
    return _build_employee_response(employee)


@employees_router.get("/{employee_id}", response_model=EmployeeResponse)
async def get_employee(
    employee_id: uuid.UUID,
    auth: AuthDep,
) -> EmployeeResponse:
    """Get employee info from the stub service."""
    employee = await get_employee_service().get_employee(employee_id)
    if employee is None:
        raise AppError(f"Employee with ID {employee_id} not found", code=ErrorCode.NOT_FOUND)
    return _build_employee_response(employee)


@employees_router.get("", response_model=EmployeeListResponse)
async def list_employees(auth: AuthDep) -> EmployeeListResponse:
    """List all employees from the stub service."""
    employees = await get_employee_service().list_employees()
    items = [_build_employee_response(e) for e in employees]
    return EmployeeListResponse(items=items, total=len(items))
