"""Tests for team membership."""

import pytest
from sqlalchemy import select

from workforce.models import Notification, TeamMember
from workforce.services.team_service import TeamService
from shared.exceptions import ConflictError, NotFoundError, UserNotFoundError


@pytest.fixture
def service(db_session, users):
    return TeamService(db_session, users["hr"])


def _leader_titles(db_session, users):
    return [
        n.title for n in db_session.scalars(
            select(Notification).where(Notification.recipient_user_id == users["team_leader"].id)
        ).all()
    ]


class TestAddMember:
    def test_adds_and_notifies_leader(self, service, db_session, users):
        member = service.add_member(users["team"].id, users["other_agent"].id)

        assert member.team_id == users["team"].id
        assert service.is_leader_of(users["team_leader"].id, users["other_agent"].id)
        assert _leader_titles(db_session, users) == ["New Agent Added to Your Team"]

    def test_already_member(self, service, users):
        with pytest.raises(ConflictError, match="already a member"):
            service.add_member(users["team"].id, users["agent"].id)

    def test_unknown_team(self, service, users):
        with pytest.raises(NotFoundError, match="Team not found"):
            service.add_member(9999, users["agent"].id)

    def test_unknown_user(self, service, users):
        with pytest.raises(UserNotFoundError):
            service.add_member(users["team"].id, 9999)

    def test_leader_acting_on_own_team_is_not_notified(self, db_session, users):
        TeamService(db_session, users["team_leader"]).add_member(users["team"].id, users["other_agent"].id)
        assert _leader_titles(db_session, users) == []


class TestRemoveMember:
    def test_removes_and_notifies_leader(self, service, db_session, users):
        service.remove_member(users["team"].id, users["agent"].id)

        remaining = db_session.scalars(select(TeamMember).where(TeamMember.team_id == users["team"].id)).all()
        assert remaining == []
        assert not service.is_leader_of(users["team_leader"].id, users["agent"].id)
        assert _leader_titles(db_session, users) == ["Agent Removed from Your Team"]

    def test_not_a_member(self, service, users):
        with pytest.raises(NotFoundError, match="not a member"):
            service.remove_member(users["team"].id, users["other_agent"].id)


class TestQueries:
    def test_members_and_teams_led(self, service, users):
        assert [u.id for u in service.members(users["team"].id)] == [users["agent"].id]
        assert [t.id for t in service.teams_led_by(users["team_leader"].id)] == [users["team"].id]

    def test_create_team_with_unknown_leader(self, service):
        with pytest.raises(UserNotFoundError, match="Team leader not found"):
            service.create_team("Night Shift", leader_id=9999)
