# ruff: noqa: TC003
from __future__ import annotations

import datetime

import sqlalchemy as sa
from sqlmodel import Field

from leavedesk.models.base import UUIDBase


class Holiday(UUIDBase, table=True):
    """A non-working day excluded from leave requests."""

    __tablename__ = "holiday"
    __table_args__ = (sa.UniqueConstraint("date", name="uq_holiday_date"),)

    date: datetime.date = Field(index=True)
    name: str = Field(max_length=255)
