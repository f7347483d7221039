from fastapi import APIRouter

from leavedesk.api.audit import audit_router
from leavedesk.api.company_settings import settings_router
from leavedesk.api.employees import employees_router
from leavedesk.api.holidays import holidays_router
from leavedesk.api.leave_requests import leave_requests_router

api_router = APIRouter()
api_router.include_router(leave_requests_router)
api_router.include_router(holidays_router)
api_router.include_router(settings_router)
api_router.include_router(employees_router)
api_router.include_router(audit_router)
