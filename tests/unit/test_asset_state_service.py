"""Tests for daily asset state transitions."""

from datetime import date

import pytest
from sqlalchemy import select

from workforce.models import AssetIncident, AssetLossRecord, AssetStateAudit, Notification
from workforce.services.asset_state_service import AssetStateService
from shared.enums import AssetState, IncidentStatus, IncidentType, LossStatus
from shared.exceptions import InvalidStateError, PermissionDeniedError, UserNotFoundError, ValidationError


DAY = date(2026, 3, 2)


@pytest.fixture
def service(db_session, users):
    return AssetStateService(db_session, users["team_leader"])


class TestBookIn:
    def test_creates_state_and_audit(self, service, db_session, users):
        agent = users["agent"]
        state = service.book_in(agent.id, "laptop", DAY, "collected")

        assert state.current_state == AssetState.COLLECTED.value
        assert state.confirmed_by == users["team_leader"].id
        assert state.agent_name == agent.full_name

        audit = db_session.scalars(select(AssetStateAudit)).one()
        assert audit.previous_state == AssetState.READY_FOR_COLLECTION.value
        assert audit.new_state == AssetState.COLLECTED.value
        assert audit.reason == "Book in: collected"

    def test_can_rebook_not_collected(self, service, users):
        agent = users["agent"]
        service.book_in(agent.id, "laptop", DAY, "not_collected")
        state = service.book_in(agent.id, "laptop", DAY, "collected")
        assert state.current_state == AssetState.COLLECTED.value

    def test_rejects_returned_asset(self, service, users):
        agent = users["agent"]
        service.book_in(agent.id, "headsets", DAY, "collected")
        service.book_out(agent.id, "headsets", DAY, "returned")

        with pytest.raises(InvalidStateError, match="Cannot book in asset in current state: returned"):
            service.book_in(agent.id, "headsets", DAY, "collected")

    def test_unknown_agent(self, service):
        with pytest.raises(UserNotFoundError):
            service.book_in(9999, "laptop", DAY, "collected")


class TestBookOut:
    def test_requires_collected(self, service, users):
        with pytest.raises(InvalidStateError, match="must be collected"):
            service.book_out(users["agent"].id, "dongle", DAY, "returned")

    def test_returned(self, service, db_session, users):
        agent = users["agent"]
        service.book_in(agent.id, "dongle", DAY, "collected")
        state = service.book_out(agent.id, "dongle", DAY, "returned")

        assert state.current_state == AssetState.RETURNED.value
        reasons = db_session.scalars(select(AssetStateAudit.reason).order_by(AssetStateAudit.id)).all()
        assert reasons == ["Book in: collected", "Book out: returned"]

    def test_lost_creates_incident_loss_and_notifications(self, service, db_session, users):
        agent = users["agent"]
        service.book_in(agent.id, "laptop", DAY, "collected")
        service.book_out(agent.id, "laptop", DAY, "lost", "Left on the bus")

        incident = db_session.scalars(select(AssetIncident)).one()
        assert incident.incident_type == IncidentType.LOST.value
        assert incident.status == IncidentStatus.REPORTED.value

        loss = db_session.scalars(select(AssetLossRecord)).one()
        assert loss.date_lost == DAY
        assert loss.reason == "Left on the bus"

        notes = db_session.scalars(select(Notification)).all()
        recipients = {n.recipient_user_id for n in notes}
        # the reporting team leader is excluded
        assert users["team_leader"].id not in recipients
        assert users["manager"].id in recipients
        assert users["hr"].id in recipients
        assert all(n.severity == "urgent" for n in notes)

    def test_not_returned_warns(self, service, db_session, users):
        agent = users["agent"]
        service.book_in(agent.id, "laptop", DAY, "collected")
        service.book_out(agent.id, "laptop", DAY, "not_returned")

        notes = db_session.scalars(select(Notification)).all()
        assert notes
        assert {n.severity for n in notes} == {"warning"}
        assert db_session.scalars(select(AssetLossRecord)).first() is None


class TestMarkFound:
    def test_requires_lost_or_unreturned(self, service, users):
        agent = users["agent"]
        service.book_in(agent.id, "laptop", DAY, "collected")
        with pytest.raises(InvalidStateError, match="not in a lost/unreturned state"):
            service.mark_found(agent.id, "laptop", DAY, "Found it")

    def test_resolves_loss_records(self, service, db_session, users):
        agent = users["agent"]
        service.book_in(agent.id, "laptop", DAY, "collected")
        service.book_out(agent.id, "laptop", DAY, "lost")

        state = service.mark_found(agent.id, "laptop", DAY, "In the locker")

        assert state.current_state == AssetState.RETURNED.value
        assert state.reason == "Found: In the locker"
        last_audit = db_session.scalars(select(AssetStateAudit).order_by(AssetStateAudit.id.desc())).first()
        assert last_audit.reason == "Asset found: In the locker"
        assert db_session.scalars(select(AssetLossRecord)).one().status == LossStatus.RESOLVED.value
        assert db_session.scalars(select(AssetIncident)).one().status == IncidentStatus.RESOLVED.value


class TestResetAgent:
    def test_wrong_password(self, service, users):
        with pytest.raises(ValidationError, match="Invalid password"):
            service.reset_agent(users["team_leader"], users["agent"].id, "wrong")

    def test_agent_outside_team(self, service, users, password):
        with pytest.raises(PermissionDeniedError):
            service.reset_agent(users["team_leader"], users["other_agent"].id, password)

    def test_missing_agent(self, service, users, password):
        with pytest.raises(UserNotFoundError):
            service.reset_agent(users["team_leader"], 9999, password)

    def test_wipes_today_and_keeps_maintenance_incidents(self, service, db_session, users, password):
        agent = users["agent"]
        today = date.today()
        service.book_in(agent.id, "laptop", today, "collected")
        service.book_in(agent.id, "headsets", today, "not_collected")

        result = service.reset_agent(users["team_leader"], agent.id, password)

        assert result["states_reset"] == 2
        assert result["reset_by"] == "leader"
        assert service.states_for_user(agent.id, today) == []
        assert db_session.scalars(select(AssetStateAudit)).all() == []

        incidents = db_session.scalars(select(AssetIncident).order_by(AssetIncident.asset_type)).all()
        assert [i.incident_type for i in incidents] == ["maintenance", "maintenance"]
        assert all(i.status == IncidentStatus.RESOLVED.value for i in incidents)
        assert "Previous state was: not_collected" in incidents[0].description
