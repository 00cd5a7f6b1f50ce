"""Tests for inventory, equipment details, history and incidents."""

from datetime import date

import pytest
from sqlalchemy import select

from workforce.models import AssetDailyState, AssetDetails, AssetIncident
from workforce.services.asset_service import AssetService
from shared.enums import AssetState, IncidentStatus, IncidentType
from shared.exceptions import AssetNotFoundError, ConflictError, NotFoundError, UserNotFoundError

DAY = date(2026, 3, 2)


@pytest.fixture
def service(db_session, users):
    return AssetService(db_session, users["hr"])


class TestInventory:
    def test_create_starts_available(self, service):
        asset = service.create_asset({"name": "ThinkPad T14", "type": "laptop", "serial_number": "SN-100"})
        assert asset.status == "available"
        assert asset.assigned_to_user_id is None

    def test_duplicate_serial(self, service):
        service.create_asset({"name": "ThinkPad T14", "type": "laptop", "serial_number": "SN-100"})
        with pytest.raises(ConflictError, match="SN-100"):
            service.create_asset({"name": "ThinkPad T14s", "type": "laptop", "serial_number": "SN-100"})

    def test_assets_without_serial_do_not_clash(self, service):
        service.create_asset({"name": "Jabra Evolve", "type": "headsets"})
        service.create_asset({"name": "Jabra Evolve", "type": "headsets"})
        assert len(service.list_assets()) == 2

    def test_assign(self, service, users):
        asset = service.create_asset({"name": "Huawei E3372", "type": "dongle"})
        assigned = service.assign_asset(asset.id, users["agent"].id)

        assert assigned.status == "assigned"
        assert assigned.assigned_to_user_id == users["agent"].id
        assert assigned.assigned_at is not None
        assert [a.id for a in service.list_assets(user_id=users["agent"].id)] == [asset.id]

    def test_assign_unknown_asset(self, service, users):
        with pytest.raises(AssetNotFoundError):
            service.assign_asset(9999, users["agent"].id)

    def test_assign_unknown_user(self, service):
        asset = service.create_asset({"name": "Huawei E3372", "type": "dongle"})
        with pytest.raises(UserNotFoundError):
            service.assign_asset(asset.id, 9999)


class TestDetails:
    def test_upsert_is_unique_per_user_and_type(self, service, db_session, users):
        agent_id = users["agent"].id
        first = service.upsert_details({"user_id": agent_id, "asset_type": "laptop", "asset_id": "LP-001"})
        second = service.upsert_details({
            "user_id": agent_id, "asset_type": "laptop", "asset_id": "LP-002", "condition": "fair",
        })

        assert second.id == first.id
        rows = db_session.scalars(select(AssetDetails).where(AssetDetails.user_id == agent_id)).all()
        assert [(d.asset_id, d.condition) for d in rows] == [("LP-002", "fair")]

    def test_condition_defaults_to_good(self, service, users):
        details = service.upsert_details({"user_id": users["agent"].id, "asset_type": "headsets"})
        assert details.condition == "good"

    def test_other_types_are_separate(self, service, users):
        agent_id = users["agent"].id
        service.upsert_details({"user_id": agent_id, "asset_type": "laptop"})
        service.upsert_details({"user_id": agent_id, "asset_type": "dongle"})
        assert [d.asset_type for d in service.details_for_user(agent_id)] == ["dongle", "laptop"]

    def test_delete_missing(self, service):
        with pytest.raises(NotFoundError):
            service.delete_details(9999)


class TestHistoricalRecords:
    def test_upsert_by_date(self, service):
        first = service.upsert_historical_record({
            "date": DAY, "book_in_records": {"agent": ["laptop"]}, "book_out_records": {}, "lost_assets": [],
        })
        second = service.upsert_historical_record({
            "date": DAY,
            "book_in_records": {"agent": ["laptop"]},
            "book_out_records": {"agent": ["laptop"]},
            "lost_assets": ["dongle"],
        })

        assert second.id == first.id
        records = service.historical_records(DAY)
        assert len(records) == 1
        assert records[0].book_out_records == {"agent": ["laptop"]}
        assert records[0].lost_assets == ["dongle"]

    def test_filters_by_day(self, service):
        service.upsert_historical_record({"date": DAY})
        service.upsert_historical_record({"date": date(2026, 3, 3)})
        assert [r.date for r in service.historical_records()] == [date(2026, 3, 3), DAY]
        assert service.historical_records(date(2026, 3, 4)) == []


class TestIncidents:
    def test_resolve(self, service, db_session, users):
        incident = AssetIncident(
            user_id=users["agent"].id,
            asset_type="laptop",
            incident_type=IncidentType.LOST.value,
            description="Left on the bus",
        )
        db_session.add(incident)
        db_session.flush()

        resolved = service.resolve_incident(incident.id, "Recovered by the bus company")

        assert resolved.status == IncidentStatus.RESOLVED.value
        assert resolved.resolution == "Recovered by the bus company"
        assert resolved.resolved_by == users["hr"].id
        assert resolved.resolved_at is not None
        assert service.list_incidents(status=IncidentStatus.REPORTED.value) == []

    def test_resolve_missing(self, service):
        with pytest.raises(NotFoundError, match="Incident not found"):
            service.resolve_incident(9999, "n/a")


class TestUnreturned:
    def test_has_unreturned(self, service, db_session, users):
        agent_id = users["agent"].id
        assert service.has_unreturned(agent_id) is False

        db_session.add(AssetDailyState(
            user_id=agent_id, agent_name="Agent Test", asset_type="headsets", date=DAY,
            current_state=AssetState.NOT_RETURNED.value,
        ))
        db_session.flush()

        assert service.has_unreturned(agent_id) is True
        assert service.has_unreturned(users["other_agent"].id) is False
        assert service.unreturned_assets()[0]["status"] == "Not Returned Yet"
