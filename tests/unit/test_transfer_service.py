"""Tests for the transfer workflow."""

from datetime import date

import pytest

from workforce.models import Team, User
from workforce.services.transfer_service import TransferService
from shared.exceptions import InvalidStateError, NotFoundError, ValidationError


@pytest.fixture
def target_team(db_session, users):
    leader = User(username="leader2", password_hash="x", first_name="Zola", role="team_leader")
    db_session.add(leader)
    db_session.flush()
    team = Team(name="Zola Team", leader_id=leader.id)
    db_session.add(team)
    db_session.flush()
    return team


@pytest.fixture
def service(db_session, users):
    return TransferService(db_session, users["hr"])


def _permanent(user_id, **fields):
    return {"user_id": user_id, "transfer_type": "permanent", "start_date": date(2026, 4, 1), **fields}


class TestCreate:
    def test_defaults_from_current_placement(self, service, users):
        transfer = service.create(_permanent(users["agent"].id))

        assert transfer.status == "pending"
        assert transfer.from_role == "agent"
        assert transfer.from_team_id == users["team"].id
        assert transfer.requested_by == users["hr"].id
        assert [a.action for a in service.audit(transfer.id)] == ["created"]

    def test_temporary_requires_end_date(self, service, users):
        with pytest.raises(ValidationError, match="end date"):
            service.create({"user_id": users["agent"].id, "transfer_type": "temporary", "start_date": date(2026, 4, 1)})

    def test_unknown_team(self, service, users):
        with pytest.raises(NotFoundError, match="Team not found"):
            service.create(_permanent(users["agent"].id, to_team_id=9999))


class TestWorkflow:
    def test_approve_permanent_moves_employee(self, service, db_session, users, target_team):
        agent = users["agent"]
        transfer = service.create(_permanent(agent.id, to_team_id=target_team.id, to_role="team_leader"))

        service.approve(transfer.id, "Agreed")

        assert transfer.status == "approved"
        assert transfer.approved_by == users["hr"].id
        assert agent.role == "team_leader"
        assert agent.reports_to == target_team.leader_id
        assert [a.action for a in service.audit(transfer.id)] == ["approved", "created"]

    def test_approve_temporary_keeps_placement(self, service, users, target_team):
        agent = users["agent"]
        transfer = service.create({
            "user_id": agent.id, "transfer_type": "temporary", "to_team_id": target_team.id,
            "start_date": date(2026, 4, 1), "end_date": date(2026, 4, 30),
        })
        service.approve(transfer.id)
        assert agent.reports_to == users["team_leader"].id

    def test_unknown_role_is_not_applied(self, service, users):
        agent = users["agent"]
        transfer = service.create(_permanent(agent.id, to_role="Senior Agent"))
        service.approve(transfer.id)
        assert agent.role == "agent"

    def test_only_pending_can_be_decided(self, service, users):
        transfer = service.create(_permanent(users["agent"].id))
        service.reject(transfer.id, "Not now")

        with pytest.raises(InvalidStateError, match="Only pending transfers can be approved"):
            service.approve(transfer.id)
        with pytest.raises(InvalidStateError, match="Only pending transfers can be rejected"):
            service.reject(transfer.id)

    def test_complete_requires_approval(self, service, users):
        transfer = service.create(_permanent(users["agent"].id))
        with pytest.raises(InvalidStateError, match="Only approved transfers can be completed"):
            service.complete(transfer.id)

        service.approve(transfer.id)
        assert service.complete(transfer.id).status == "completed"

    def test_list_by_status(self, service, users):
        first = service.create(_permanent(users["agent"].id))
        service.create(_permanent(users["other_agent"].id))
        service.approve(first.id)

        assert [t.id for t in service.list_transfers("approved")] == [first.id]
        assert len(service.list_transfers()) == 2
