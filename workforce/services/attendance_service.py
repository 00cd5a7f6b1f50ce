"""Attendance service: clock-in/out, status changes and their audit trail."""

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal

import structlog
from sqlalchemy import select
from sqlalchemy.orm import Session

from workforce.models.attendance import Attendance, AttendanceAudit
from workforce.models.user import User
from workforce.services.team_service import TeamService
from shared.enums import AttendanceStatus, UserRole
from shared.exceptions import NotFoundError, PermissionDeniedError, UserNotFoundError, ValidationError

logger = structlog.get_logger(__name__)

# Statuses for which the employee is on site and gets a clock-in time
ON_SITE_STATUSES = (AttendanceStatus.PRESENT.value, AttendanceStatus.LATE.value)


def calculate_hours(clock_in: datetime, clock_out: datetime) -> Decimal:
    """
    Hours between two timestamps, rounded to two decimals.

    Raises:
        ValidationError: If clock_out precedes clock_in
    """
    if clock_out < clock_in:
        raise ValidationError("Clock-out time cannot be before clock-in time")
    seconds = Decimal((clock_out - clock_in).total_seconds())
    return (seconds / Decimal(3600)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


class AttendanceService:
    """
    Service for daily attendance records.

    Every status change is written to attendance_audit together with
    the user who made it.
    """

    def __init__(self, db: Session, acting_user: User | None = None):
        self.db = db
        self.acting_user = acting_user

    def _today_record(self, user_id: int, day: date | None = None) -> Attendance | None:
        return self.db.scalars(
            select(Attendance)
            .where(Attendance.user_id == user_id, Attendance.date == (day or date.today()))
            .order_by(Attendance.id)
        ).first()

    def _log_audit(self, record: Attendance, previous_status: str | None, reason: str | None) -> None:
        self.db.add(AttendanceAudit(
            attendance_id=record.id,
            user_id=record.user_id,
            previous_status=previous_status,
            new_status=record.status,
            reason=reason,
            changed_by=self.acting_user.id if self.acting_user else None,
        ))
        self.db.flush()

    def _check_can_manage(self, user_id: int) -> None:
        """
        Team leaders may only manage members of their own teams.

        Raises:
            PermissionDeniedError: Otherwise
        """
        actor = self.acting_user
        if actor is None or actor.role != UserRole.TEAM_LEADER.value:
            return
        if not TeamService(self.db).is_leader_of(actor.id, user_id):
            raise PermissionDeniedError("You can only create attendance for your team members")

    # QUERIES

    def today(self) -> list[tuple[Attendance, User]]:
        """Today's records with the employee row."""
        return list(self.db.execute(
            select(Attendance, User)
            .join(User, User.id == Attendance.user_id)
            .where(Attendance.date == date.today())
            .order_by(User.first_name, User.last_name)
        ).all())

    def for_user(self, user_id: int, start: date | None = None, end: date | None = None) -> list[Attendance]:
        query = select(Attendance).where(Attendance.user_id == user_id)
        if start is not None:
            query = query.where(Attendance.date >= start)
        if end is not None:
            query = query.where(Attendance.date <= end)
        return list(self.db.scalars(query.order_by(Attendance.date.desc())).all())

    def in_range(self, start: date, end: date) -> list[Attendance]:
        if end < start:
            raise ValidationError("End date cannot be before start date")
        return list(self.db.scalars(
            select(Attendance)
            .where(Attendance.date >= start, Attendance.date <= end)
            .order_by(Attendance.date, Attendance.user_id)
        ).all())

    def audit(self, attendance_id: int) -> list[AttendanceAudit]:
        if self.db.get(Attendance, attendance_id) is None:
            raise NotFoundError("Attendance record not found")
        return list(self.db.scalars(
            select(AttendanceAudit)
            .where(AttendanceAudit.attendance_id == attendance_id)
            .order_by(AttendanceAudit.changed_at.desc(), AttendanceAudit.id.desc())
        ).all())

    # SELF SERVICE

    def clock_in(self, user: User) -> Attendance:
        """
        Clocks the user in for today.

        Raises:
            ValidationError: If the user already clocked in today
        """
        now = datetime.now()
        record = self._today_record(user.id, now.date())
        if record is not None and record.clock_in is not None:
            raise ValidationError("Already clocked in today")

        if record is None:
            record = Attendance(user_id=user.id, date=now.date(), clock_in=now, status=AttendanceStatus.PRESENT.value)
            self.db.add(record)
            self.db.flush()
            self._log_audit(record, None, "Clock in")
        else:
            previous = record.status
            record.clock_in = now
            record.status = AttendanceStatus.PRESENT.value
            self.db.flush()
            self._log_audit(record, previous, "Clock in")
        return record

    def clock_out(self, user: User) -> Attendance:
        """
        Clocks the user out and computes hours worked.

        Raises:
            ValidationError: If there is no open clock-in today
        """
        now = datetime.now()
        record = self._today_record(user.id, now.date())
        if record is None or record.clock_in is None:
            raise ValidationError("You have not clocked in today")
        if record.clock_out is not None:
            raise ValidationError("Already clocked out today")

        record.clock_out = now
        record.hours_worked = calculate_hours(record.clock_in, now)
        self.db.flush()
        return record

    # MANAGEMENT

    def record_for_user(self, user_id: int, status: AttendanceStatus, reason: str | None = None) -> Attendance:
        """
        Creates or updates today's record for another employee.

        Raises:
            UserNotFoundError: If the employee does not exist
            PermissionDeniedError: If a team leader targets someone outside their teams
        """
        if self.db.get(User, user_id) is None:
            raise UserNotFoundError()
        self._check_can_manage(user_id)
        return self.set_status_for_day(user_id, date.today(), AttendanceStatus(status), reason)

    def set_status_for_day(
        self, user_id: int, day: date, status: AttendanceStatus, reason: str | None = None
    ) -> Attendance:
        """Upserts the record for a day without permission checks."""
        status_value = AttendanceStatus(status).value
        record = self._today_record(user_id, day)
        if record is None:
            record = Attendance(
                user_id=user_id,
                date=day,
                status=status_value,
                clock_in=datetime.now() if status_value in ON_SITE_STATUSES else None,
            )
            self.db.add(record)
            self.db.flush()
            self._log_audit(record, None, reason)
            return record

        previous = record.status
        if previous != status_value:
            record.status = status_value
            if status_value in ON_SITE_STATUSES and record.clock_in is None:
                record.clock_in = datetime.now()
            self.db.flush()
            self._log_audit(record, previous, reason)
        return record

    def update_recorded_status(
        self, user_id: int, day: date, status: AttendanceStatus, reason: str | None = None
    ) -> Attendance | None:
        """Changes the status of an existing record for the day; a day with no record stays empty."""
        record = self._today_record(user_id, day)
        if record is None:
            return None
        previous = record.status
        status_value = AttendanceStatus(status).value
        if previous != status_value:
            record.status = status_value
            self.db.flush()
            self._log_audit(record, previous, reason)
        return record

    def update_status(self, attendance_id: int, status: AttendanceStatus, reason: str | None = None) -> Attendance:
        """
        Changes the status of an existing record.

        Raises:
            NotFoundError: If the record does not exist
            PermissionDeniedError: If a team leader targets someone outside their teams
        """
        record = self.db.get(Attendance, attendance_id)
        if record is None:
            raise NotFoundError("Attendance record not found")
        self._check_can_manage(record.user_id)

        previous = record.status
        record.status = AttendanceStatus(status).value
        self.db.flush()
        self._log_audit(record, previous, reason)
        logger.info("attendance_status_changed", attendance_id=record.id, previous=previous, new=record.status)
        return record
