from __future__ import annotations

import enum

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ErrorCode(enum.StrEnum):
    """Machine-readable failure kinds surfaced by the leave engine."""

    NOT_FOUND = "NOT_FOUND"
    INVALID_RANGE = "INVALID_RANGE"
    PAST_DATE = "PAST_DATE"
    INVALID_DURATION = "INVALID_DURATION"
    ALL_NON_WORKING_DAYS = "ALL_NON_WORKING_DAYS"
    OVERLAP = "OVERLAP"
    ALLOWANCE_EXCEEDED = "ALLOWANCE_EXCEEDED"
    FORBIDDEN = "FORBIDDEN"
    NOT_PENDING = "NOT_PENDING"
    ALREADY_CANCELLED = "ALREADY_CANCELLED"


_STATUS_BY_CODE: dict[ErrorCode, int] = {
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INVALID_RANGE: status.HTTP_400_BAD_REQUEST,
    ErrorCode.PAST_DATE: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_DURATION: status.HTTP_400_BAD_REQUEST,
    ErrorCode.ALL_NON_WORKING_DAYS: status.HTTP_400_BAD_REQUEST,
    ErrorCode.OVERLAP: status.HTTP_400_BAD_REQUEST,
    ErrorCode.ALLOWANCE_EXCEEDED: status.HTTP_400_BAD_REQUEST,
    ErrorCode.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorCode.NOT_PENDING: status.HTTP_409_CONFLICT,
    ErrorCode.ALREADY_CANCELLED: status.HTTP_409_CONFLICT,
}


class ErrorResponse(BaseModel):
    """Standard error response schema."""

    error: str
    code: str | None = None
    detail: str | None = None
    status_code: int
    remaining_days: int | None = None


class AppError(Exception):
    """Base application exception."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        code: ErrorCode | None = None,
    ) -> None:
        self.message = message
        self.code = code
        if status_code is None:
            status_code = _STATUS_BY_CODE.get(code, status.HTTP_500_INTERNAL_SERVER_ERROR)  # type: ignore[arg-type]
        self.status_code = status_code
        super().__init__(self.message)


class AllowanceExceededError(AppError):
    """Raised when a request would push the employee past the annual allowance."""

    def __init__(self, message: str, remaining_days: int) -> None:
        self.remaining_days = remaining_days
        super().__init__(message, code=ErrorCode.ALLOWANCE_EXCEEDED)


async def _app_exception_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=type(exc).__name__,
            code=exc.code.value if exc.code is not None else None,
            detail=exc.message,
            status_code=exc.status_code,
            remaining_days=getattr(exc, "remaining_days", None),
        ).model_dump(exclude_none=True),
    )


async def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ErrorResponse(
            error="ValidationError",
            detail=str(exc.errors()),
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        ).model_dump(exclude_none=True),
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers on the application."""
    app.add_exception_handler(AppError, _app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)  # type: ignore[arg-type]
