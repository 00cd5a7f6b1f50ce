"""Tests for user management."""

from datetime import date

import pytest
from sqlalchemy import select

from workforce.core.security import verify_password
from workforce.models import Attendance, Notification, Team, TeamMember, User
from workforce.services.asset_state_service import AssetStateService
from workforce.services.attendance_service import AttendanceService
from workforce.services.user_service import UserService
from shared.enums import AttendanceStatus, UserRole
from shared.exceptions import ConflictError, UserNotFoundError, ValidationError


@pytest.fixture
def service(db_session, users):
    return UserService(db_session, users["admin"])


class TestCreateAndUpdate:
    def test_create_hashes_password(self, service):
        user = service.create_user({
            "username": "newbie", "password": "hunter22", "first_name": "New", "role": UserRole.AGENT,
        })
        assert user.role == "agent"
        assert user.password_hash != "hunter22"
        assert verify_password("hunter22", user.password_hash)

    def test_duplicate_username(self, service, users):
        with pytest.raises(ConflictError, match="already taken"):
            service.create_user({"username": "agent", "password": "whatever1"})

    def test_cannot_report_to_self(self, service, users):
        agent = users["agent"]
        with pytest.raises(ValidationError):
            service.update_user(agent, {"reports_to": agent.id})

    def test_password_update_rehashes(self, service, users):
        agent = users["agent"]
        service.update_user(agent, {"password": "changed99"})
        assert verify_password("changed99", agent.password_hash)


class TestReassignTeamLeader:
    def test_moves_agent_and_creates_team(self, service, db_session, users):
        new_leader = User(username="leader2", password_hash="x", first_name="Zola", role="team_leader")
        db_session.add(new_leader)
        db_session.flush()

        team = service.reassign_team_leader(users["agent"], new_leader.id)

        assert team.name == "Zola Team"
        assert users["agent"].reports_to == new_leader.id
        memberships = db_session.scalars(select(TeamMember).where(TeamMember.user_id == users["agent"].id)).all()
        assert [m.team_id for m in memberships] == [team.id]

        titles = {n.title for n in db_session.scalars(select(Notification)).all()}
        assert titles == {"Agent Removed from Your Team", "New Agent Added to Your Team"}

    def test_target_must_be_team_leader(self, service, users):
        with pytest.raises(ValidationError, match="not a team leader"):
            service.reassign_team_leader(users["agent"], users["manager"].id)

    def test_unknown_leader(self, service, users):
        with pytest.raises(UserNotFoundError):
            service.reassign_team_leader(users["agent"], 9999)


class TestDeleteUser:
    def test_cannot_delete_self(self, service, users):
        with pytest.raises(ValidationError, match="your own account"):
            service.delete_user(users["admin"])

    def test_removes_dependent_rows(self, service, db_session, users):
        agent = users["agent"]
        AttendanceService(db_session, users["hr"]).record_for_user(agent.id, AttendanceStatus.PRESENT)
        AssetStateService(db_session, users["team_leader"]).book_in(agent.id, "laptop", date(2026, 3, 2), "collected")

        service.delete_user(agent)

        assert db_session.get(User, agent.id) is None
        assert db_session.scalars(select(Attendance)).all() == []
        assert db_session.scalars(select(TeamMember)).all() == []

    def test_team_leader_deletion_detaches_team(self, service, db_session, users):
        leader_id = users["team_leader"].id
        service.delete_user(users["team_leader"])

        team = db_session.get(Team, users["team"].id)
        assert team.leader_id is None
        assert db_session.get(User, users["agent"].id).reports_to is None
        assert leader_id not in {u.id for u in db_session.scalars(select(User)).all()}
