"""Attendance routes."""

from datetime import date

from fastapi import APIRouter, Depends, Query

from workforce.api.dependencies import CurrentUser, DBSession
from workforce.core.dependencies import ensure_self_or_roles, require_asset_oversight, require_people_ops
from workforce.models.user import User
from workforce.schemas.attendance import (
    AttendanceAuditResponse,
    AttendanceResponse,
    AttendanceStatusUpdate,
    AttendanceWithUser,
    ClockInForUser,
)
from workforce.services.attendance_service import AttendanceService
from shared.constants import ASSET_OVERSIGHT_ROLES

router = APIRouter(prefix="/attendance", tags=["attendance"])


@router.get("/today", response_model=list[AttendanceWithUser])
async def today_attendance(
    db: DBSession,
    current_user: User = Depends(require_asset_oversight),
):
    """Today's records with the employee's username, names and role."""
    rows = AttendanceService(db).today()
    return [
        AttendanceWithUser(
            **AttendanceResponse.model_validate(record).model_dump(),
            username=user.username,
            first_name=user.first_name,
            last_name=user.last_name,
            role=user.role,
        )
        for record, user in rows
    ]


@router.get("/range", response_model=list[AttendanceResponse])
async def attendance_range(
    db: DBSession,
    start: date = Query(..., description="First day (inclusive)"),
    end: date = Query(..., description="Last day (inclusive)"),
    current_user: User = Depends(require_asset_oversight),
):
    """
    Errors:
    - **400 Bad Request**: end is before start.
    """
    return AttendanceService(db).in_range(start, end)


@router.get("/user/{user_id}", response_model=list[AttendanceResponse])
async def user_attendance(
    user_id: int,
    db: DBSession,
    current_user: CurrentUser,
    start_date: date | None = Query(None),
    end_date: date | None = Query(None),
):
    """An employee's records, newest first. Employees may read their own."""
    ensure_self_or_roles(current_user, user_id, ASSET_OVERSIGHT_ROLES)
    return AttendanceService(db).for_user(user_id, start_date, end_date)


@router.post("/clock-in", response_model=AttendanceResponse)
async def clock_in(db: DBSession, current_user: CurrentUser):
    """
    Clocks the current user in.

    Errors:
    - **400 Bad Request**: Already clocked in today.
    """
    record = AttendanceService(db, current_user).clock_in(current_user)
    db.commit()
    return record


@router.post("/clock-out", response_model=AttendanceResponse)
async def clock_out(db: DBSession, current_user: CurrentUser):
    """
    Clocks the current user out and records hours worked.

    Errors:
    - **400 Bad Request**: Not clocked in, or already clocked out today.
    """
    record = AttendanceService(db, current_user).clock_out(current_user)
    db.commit()
    return record


@router.post("/clock-in-for-user", response_model=AttendanceResponse)
async def clock_in_for_user(
    data: ClockInForUser,
    db: DBSession,
    current_user: User = Depends(require_people_ops),
):
    """
    Records today's attendance for another employee.

    Errors:
    - **403 Forbidden**: Team leader acting outside their teams.
    - **404 Not Found**: Employee does not exist.
    """
    record = AttendanceService(db, current_user).record_for_user(data.user_id, data.status, data.reason)
    db.commit()
    return record


@router.patch("/{attendance_id}/status", response_model=AttendanceResponse)
async def update_attendance_status(
    attendance_id: int,
    data: AttendanceStatusUpdate,
    db: DBSession,
    current_user: User = Depends(require_people_ops),
):
    record = AttendanceService(db, current_user).update_status(attendance_id, data.status, data.reason)
    db.commit()
    return record


@router.get("/{attendance_id}/audit", response_model=list[AttendanceAuditResponse])
async def attendance_audit(
    attendance_id: int,
    db: DBSession,
    current_user: User = Depends(require_asset_oversight),
):
    return AttendanceService(db).audit(attendance_id)
