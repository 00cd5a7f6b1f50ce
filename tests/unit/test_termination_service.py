"""Tests for termination processing."""

from datetime import date, timedelta

import pytest
from sqlalchemy import select

from workforce.models import Attendance, AttendanceAudit, Notification
from workforce.services.termination_service import TerminationService
from shared.exceptions import UserNotFoundError, ValidationError


@pytest.fixture
def service(db_session, users):
    return TerminationService(db_session, users["hr"])


def _data(user_id, status_type="terminated", **fields):
    return {"user_id": user_id, "status_type": status_type, "termination_date": date.today(), **fields}


def _present_today(db_session, user):
    record = Attendance(user_id=user.id, date=date.today(), status="present")
    db_session.add(record)
    db_session.flush()
    return record


class TestCreate:
    def test_deactivates_and_records_attendance(self, service, db_session, users):
        agent = users["agent"]
        _present_today(db_session, agent)
        termination = service.create(_data(agent.id, "AWOL", comment="No show"))

        assert termination.processed_by == users["hr"].id
        assert termination.asset_return_status == "pending"
        assert agent.is_active is False

        record = db_session.scalars(select(Attendance).where(Attendance.user_id == agent.id)).one()
        assert record.status == "AWOL"
        audit = db_session.scalars(select(AttendanceAudit).where(AttendanceAudit.attendance_id == record.id)).one()
        assert (audit.previous_status, audit.new_status) == ("present", "AWOL")

    @pytest.mark.parametrize("status_type, attendance", [
        ("retirement", "on leave"),
        ("suspended", "suspended"),
        ("layoff", "absent"),
    ])
    def test_attendance_mapping(self, service, db_session, users, status_type, attendance):
        _present_today(db_session, users["other_agent"])
        service.create(_data(users["other_agent"].id, status_type))
        record = db_session.scalars(select(Attendance)).one()
        assert record.status == attendance

    def test_no_attendance_row_created_without_one_today(self, service, db_session, users):
        """A resignation with a later last working day leaves today's attendance untouched."""
        service.create(_data(
            users["agent"].id, "resignation", last_working_day=date.today() + timedelta(days=14)
        ))
        assert db_session.scalars(select(Attendance)).all() == []

    def test_rejects_second_active_record(self, service, users):
        service.create(_data(users["agent"].id, last_working_day=date.today() + timedelta(days=7)))
        with pytest.raises(ValidationError, match="already has an active termination"):
            service.create(_data(users["agent"].id))

    def test_past_record_is_not_active(self, service, users):
        past = date.today() - timedelta(days=30)
        service.create(_data(users["agent"].id, termination_date=past, last_working_day=past))
        assert service.active_for_user(users["agent"].id) is None

    def test_unknown_user(self, service):
        with pytest.raises(UserNotFoundError):
            service.create(_data(9999))

    def test_notifies_chain_of_command(self, service, db_session, users):
        service.create(_data(users["agent"].id, "suspended"))
        recipients = {n.recipient_user_id for n in db_session.scalars(select(Notification)).all()}
        assert users["team_leader"].id in recipients
        assert users["hr"].id in recipients
