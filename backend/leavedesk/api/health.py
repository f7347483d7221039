import logging
from typing import Literal

from fastapi import APIRouter
from pydantic import BaseModel
from sqlalchemy import text

from leavedesk.config import get_settings
from leavedesk.db import SessionDep

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: Literal["ok", "degraded"]
    version: str
    environment: str
    database: bool


@router.get("/health", response_model=HealthResponse)
async def health(session: SessionDep) -> HealthResponse:
    """Report service health, degrading when the database is unreachable."""
    settings = get_settings()
    database_ok = True

    try:
        await session.execute(text("SELECT 1"))
    except Exception:
        logger.exception("Health check: database connectivity failed")
        database_ok = False

    return HealthResponse(
        status="ok" if database_ok else "degraded",
        version=settings.app_version,
        environment=settings.environment,
        database=database_ok,
    )
