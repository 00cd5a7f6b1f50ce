"""Tests for attendance clock-in/out and status changes."""

from datetime import datetime
from decimal import Decimal

import pytest
from sqlalchemy import select

from workforce.models import AttendanceAudit
from workforce.services.attendance_service import AttendanceService, calculate_hours
from shared.enums import AttendanceStatus
from shared.exceptions import NotFoundError, PermissionDeniedError, UserNotFoundError, ValidationError


class TestCalculateHours:
    def test_rounds_to_two_decimals(self):
        start = datetime(2026, 3, 2, 8, 0, 0)
        assert calculate_hours(start, datetime(2026, 3, 2, 16, 30, 0)) == Decimal("8.50")
        assert calculate_hours(start, datetime(2026, 3, 2, 8, 20, 0)) == Decimal("0.33")

    def test_clock_out_before_clock_in(self):
        with pytest.raises(ValidationError, match="cannot be before"):
            calculate_hours(datetime(2026, 3, 2, 9), datetime(2026, 3, 2, 8))


class TestClock:
    def test_clock_in_then_out(self, db_session, users):
        agent = users["agent"]
        service = AttendanceService(db_session, agent)

        record = service.clock_in(agent)
        assert record.status == "present"
        assert record.clock_in is not None

        record = service.clock_out(agent)
        assert record.clock_out is not None
        assert record.hours_worked >= Decimal("0")

    def test_double_clock_in(self, db_session, users):
        agent = users["agent"]
        service = AttendanceService(db_session, agent)
        service.clock_in(agent)
        with pytest.raises(ValidationError, match="Already clocked in"):
            service.clock_in(agent)

    def test_clock_out_without_clock_in(self, db_session, users):
        agent = users["agent"]
        with pytest.raises(ValidationError, match="not clocked in"):
            AttendanceService(db_session, agent).clock_out(agent)

    def test_double_clock_out(self, db_session, users):
        agent = users["agent"]
        service = AttendanceService(db_session, agent)
        service.clock_in(agent)
        service.clock_out(agent)
        with pytest.raises(ValidationError, match="Already clocked out"):
            service.clock_out(agent)

    def test_clock_in_after_absent_record(self, db_session, users):
        agent = users["agent"]
        AttendanceService(db_session, users["hr"]).record_for_user(agent.id, AttendanceStatus.ABSENT)

        record = AttendanceService(db_session, agent).clock_in(agent)
        assert record.status == "present"
        audits = db_session.scalars(select(AttendanceAudit).order_by(AttendanceAudit.id)).all()
        assert [(a.previous_status, a.new_status) for a in audits] == [(None, "absent"), ("absent", "present")]


class TestManagement:
    def test_team_leader_manages_own_team(self, db_session, users):
        service = AttendanceService(db_session, users["team_leader"])
        record = service.record_for_user(users["agent"].id, AttendanceStatus.SICK, "Called in sick")
        assert record.status == "sick"
        assert record.clock_in is None

    def test_team_leader_outside_team(self, db_session, users):
        service = AttendanceService(db_session, users["team_leader"])
        with pytest.raises(PermissionDeniedError, match="your team members"):
            service.record_for_user(users["other_agent"].id, AttendanceStatus.PRESENT)

    def test_hr_manages_anyone(self, db_session, users):
        record = AttendanceService(db_session, users["hr"]).record_for_user(
            users["other_agent"].id, AttendanceStatus.LATE
        )
        assert record.clock_in is not None

    def test_unknown_user(self, db_session, users):
        with pytest.raises(UserNotFoundError):
            AttendanceService(db_session, users["hr"]).record_for_user(9999, AttendanceStatus.PRESENT)

    def test_update_status_writes_audit(self, db_session, users):
        service = AttendanceService(db_session, users["hr"])
        record = service.record_for_user(users["agent"].id, AttendanceStatus.PRESENT)

        service.update_status(record.id, AttendanceStatus.LATE, "Arrived 09:40")

        entries = service.audit(record.id)
        assert entries[0].previous_status == "present"
        assert entries[0].new_status == "late"
        assert entries[0].changed_by == users["hr"].id

    def test_update_missing_record(self, db_session, users):
        with pytest.raises(NotFoundError):
            AttendanceService(db_session, users["hr"]).update_status(9999, AttendanceStatus.LATE)

    def test_range_validation(self, db_session, users):
        service = AttendanceService(db_session, users["hr"])
        with pytest.raises(ValidationError):
            service.in_range(datetime(2026, 3, 2).date(), datetime(2026, 3, 1).date())
