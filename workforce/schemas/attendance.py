"""Pydantic schemas for attendance."""

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from shared.enums import AttendanceStatus


class AttendanceResponse(BaseModel):
    """Attendance record."""

    id: int
    user_id: int
    date: dt.date
    clock_in: dt.datetime | None = None
    clock_out: dt.datetime | None = None
    status: str
    hours_worked: Decimal = Decimal("0")

    model_config = ConfigDict(from_attributes=True)


class AttendanceWithUser(AttendanceResponse):
    """Attendance record with the employee's display fields."""

    username: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    role: str | None = None


class ClockInForUser(BaseModel):
    """Record attendance on behalf of a team member."""

    user_id: int = Field(..., description="Employee ID")
    status: AttendanceStatus = Field(default=AttendanceStatus.PRESENT)
    reason: str | None = None


class AttendanceStatusUpdate(BaseModel):
    status: AttendanceStatus
    reason: str | None = Field(None, max_length=500)


class AttendanceAuditResponse(BaseModel):
    id: int
    attendance_id: int
    user_id: int
    previous_status: str | None = None
    new_status: str
    reason: str | None = None
    changed_by: int | None = None
    changed_at: dt.datetime

    model_config = ConfigDict(from_attributes=True)
