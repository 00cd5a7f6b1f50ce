"""Tests for notification routing and the inbox."""

from datetime import date

import pytest

from workforce.models import Termination, Transfer
from workforce.services.notification_service import NotificationService, action_url_for, termination_message
from shared.enums import NotificationSubject


@pytest.fixture
def service(db_session):
    return NotificationService(db_session)


class TestActionUrl:
    @pytest.mark.parametrize("role, view, url", [
        ("admin", "transfers", "/admin/hr?view=transfers"),
        ("admin", "team", "/admin/team-leader"),
        ("hr", "assets", "/hr?view=assets"),
        ("hr", "team", "/"),
        ("contact_center_manager", "assets", "/contact-center"),
        ("contact_center_ops_manager", "team", "/contact-center"),
        ("team_leader", "terminations", "/team-leader"),
        ("agent", "team", "/"),
    ])
    def test_routes(self, role, view, url):
        assert action_url_for(role, view) == url


class TestTerminationMessage:
    def test_known_type_with_comment(self):
        title, body, severity = termination_message("AWOL", "Ann Lee", "No contact for 3 days")
        assert title == "Agent AWOL Alert"
        assert body.endswith("Reason: No contact for 3 days")
        assert severity == "urgent"

    def test_resignation_details(self):
        title, body, severity = termination_message("resignation", "Ann Lee", "Moving abroad")
        assert title == "Agent Resignation Notice"
        assert "Details: Moving abroad" in body
        assert severity == "info"

    def test_other_type(self):
        title, body, severity = termination_message("layoff", "Ann Lee")
        assert title == "Agent layoff Status"
        assert body == "Ann Lee has been marked as layoff."
        assert severity == "warning"


class TestRecipients:
    def test_managers_without_duplicates(self, service, users):
        managers = service.get_managers_for_user(users["team_leader"])
        ids = [m.id for m in managers]
        assert ids[0] == users["manager"].id
        assert len(ids) == len(set(ids))
        assert users["ops_manager"].id in ids

    def test_team_leader_for_agent(self, service, users):
        assert service.get_team_leader_for_agent(users["agent"].id).id == users["team_leader"].id
        assert service.get_team_leader_for_agent(users["other_agent"].id) is None


class TestTransferNotifications:
    def test_requested_excludes_requester(self, service, db_session, users):
        transfer = Transfer(
            user_id=users["agent"].id, transfer_type="permanent",
            start_date=date(2026, 4, 1), requested_by=users["hr"].id,
        )
        db_session.add(transfer)
        db_session.flush()

        created = service.notify_transfer_requested(transfer, users["hr"])
        recipients = {n.recipient_user_id for n in created}

        assert users["hr"].id not in recipients
        assert {users["team_leader"].id, users["manager"].id, users["admin"].id} <= recipients
        assert all(n.requires_action for n in created)
        assert len(created) == len(recipients)

    def test_rejected_by_requester_is_silent(self, service, db_session, users):
        transfer = Transfer(
            user_id=users["agent"].id, transfer_type="temporary", start_date=date(2026, 4, 1),
            end_date=date(2026, 4, 30), requested_by=users["hr"].id,
        )
        db_session.add(transfer)
        db_session.flush()
        assert service.notify_transfer_rejected(transfer, users["hr"]) == []

    def test_approved_falls_back_to_current_leader(self, service, db_session, users):
        """With no team on the request, the agent's current leader hears about the move."""
        transfer = Transfer(
            user_id=users["agent"].id, transfer_type="temporary", start_date=date(2026, 4, 1),
            end_date=date(2026, 4, 30), requested_by=users["hr"].id,
        )
        db_session.add(transfer)
        db_session.flush()

        created = service.notify_transfer_approved(transfer, users["admin"])
        by_recipient = {n.recipient_user_id: n.title for n in created}
        assert by_recipient[users["team_leader"].id] == "Agent Transferred Out"
        assert by_recipient[users["hr"].id] == "Transfer Request Approved"

    def test_approved_into_current_team_is_not_a_transfer_out(self, service, db_session, users):
        transfer = Transfer(
            user_id=users["agent"].id, transfer_type="permanent", start_date=date(2026, 4, 1),
            to_team_id=users["team"].id, requested_by=users["hr"].id,
        )
        db_session.add(transfer)
        db_session.flush()

        created = service.notify_transfer_approved(transfer, users["admin"])
        leader_titles = [n.title for n in created if n.recipient_user_id == users["team_leader"].id]
        assert leader_titles == ["New Agent Assigned"]


class TestTerminationNotifications:
    def _termination(self, db_session, users, status_type="AWOL"):
        termination = Termination(
            user_id=users["agent"].id, status_type=status_type, termination_date=date(2026, 3, 2),
        )
        db_session.add(termination)
        db_session.flush()
        return termination

    def test_team_leader_processor_gets_confirmation(self, service, db_session, users):
        termination = self._termination(db_session, users)
        created = service.notify_termination_created(termination, users["team_leader"])

        by_recipient = {n.recipient_user_id: n for n in created}
        confirmation = by_recipient[users["team_leader"].id]
        assert confirmation.title == "Agent AWOL Alert - Confirmation"
        assert confirmation.body.startswith("You have recorded:")
        assert confirmation.metadata_json["is_confirmation"] is True

        manager_note = by_recipient[users["manager"].id]
        assert manager_note.body.endswith("(Reported by: Leader Test)")
        assert users["hr"].id in by_recipient
        assert users["admin"].id in by_recipient

    def test_hr_processor_reaches_team_leader_and_manager(self, service, db_session, users):
        termination = self._termination(db_session, users, "resignation")
        created = service.notify_termination_created(termination, users["hr"])
        recipients = {n.recipient_user_id for n in created}
        assert {users["team_leader"].id, users["manager"].id, users["hr"].id} <= recipients


class TestInbox:
    def test_unread_and_mark_read(self, service, db_session, users):
        agent = users["agent"]
        first = service.create(agent, "One", "Body", NotificationSubject.SYSTEM)
        service.create(agent, "Two", "Body", NotificationSubject.SYSTEM)

        assert service.unread_count(agent.id) == 2
        assert service.mark_read(first.id, agent.id).is_read is True
        assert service.unread_count(agent.id) == 1
        assert [n.title for n in service.list_for_user(agent.id, unread_only=True)] == ["Two"]

        assert service.mark_all_read(agent.id) == 1
        assert service.unread_count(agent.id) == 0

    def test_cannot_read_someone_elses(self, service, db_session, users):
        note = service.create(users["agent"], "Private", "Body", NotificationSubject.SYSTEM)
        assert service.mark_read(note.id, users["other_agent"].id) is None
        assert note.is_read is False
