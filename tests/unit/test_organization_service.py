"""Tests for the organisation hierarchy and bulk assignments."""

import pytest

from workforce.services.organization_service import OrganizationService, summarize_bulk
from shared.exceptions import ConflictError, ValidationError


@pytest.fixture
def service(db_session, users):
    return OrganizationService(db_session, users["hr"])


@pytest.fixture
def hierarchy(service):
    """Two divisions, each with one department and one section."""
    sales = service.create_division({"name": "Telesales"})
    support = service.create_division({"name": "Customer Service"})
    floor = service.create_department({"name": "Sales Floor", "division_id": sales.id})
    help_desk = service.create_department({"name": "Support", "division_id": support.id})
    inbound = service.create_section({"name": "Inbound", "department_id": floor.id})
    queries = service.create_section({"name": "General Queries", "department_id": help_desk.id})
    return {
        "sales": sales, "support": support,
        "floor": floor, "help_desk": help_desk,
        "inbound": inbound, "queries": queries,
    }


class TestSummarizeBulk:
    def test_messages(self):
        ok = {"id": 1, "success": True, "error": None}
        bad = {"id": 2, "success": False, "error": "boom"}
        assert summarize_bulk([ok, ok])["message"] == "All 2 succeeded"
        assert summarize_bulk([bad])["message"] == "All 1 failed"

        partial = summarize_bulk([ok, bad, ok])
        assert partial["message"] == "Partial success: 2 succeeded, 1 failed"
        assert partial["total_requested"] == 3
        assert partial["failure_count"] == 1


class TestAssignments:
    def test_inconsistent_combination(self, service, users, hierarchy):
        with pytest.raises(ValidationError, match="Department does not belong"):
            service.create_assignment(users["agent"].id, hierarchy["sales"].id, hierarchy["help_desk"].id)
        with pytest.raises(ValidationError, match="Section does not belong"):
            service.create_assignment(
                users["agent"].id, hierarchy["sales"].id, hierarchy["floor"].id, hierarchy["queries"].id
            )

    def test_duplicate(self, service, users, hierarchy):
        args = (users["agent"].id, hierarchy["sales"].id, hierarchy["floor"].id, hierarchy["inbound"].id)
        service.create_assignment(*args)
        with pytest.raises(ConflictError):
            service.create_assignment(*args)

    def test_bulk_partial_failure(self, service, users, hierarchy):
        sales, floor = hierarchy["sales"].id, hierarchy["floor"].id
        service.create_assignment(users["agent"].id, sales, floor)

        result = service.bulk_create_assignments(
            [users["agent"].id, users["other_agent"].id, 9999], sales, floor
        )

        assert result["message"] == "Partial success: 1 succeeded, 2 failed"
        by_id = {r["id"]: r for r in result["results"]}
        assert by_id[users["other_agent"].id]["success"] is True
        assert "assignment_id" in by_id[users["other_agent"].id]
        assert by_id[users["agent"].id]["error"] == "User already has this assignment"
        assert by_id[9999]["success"] is False

    def test_bulk_delete(self, service, users, hierarchy):
        created = service.create_assignment(users["agent"].id, hierarchy["sales"].id, hierarchy["floor"].id)
        result = service.bulk_delete_assignments([created.id, 424242])
        assert result["success_count"] == 1
        assert service.list_assignments() == []

    def test_auto_assign_round_robin(self, service, users, hierarchy):
        result = service.auto_assign_agents()

        assert result["success_count"] == 2
        assigned = {a.user_id: (a.division_id, a.section_id) for a in service.list_assignments()}
        assert assigned[users["agent"].id] != assigned[users["other_agent"].id]
        assert service.auto_assign_agents()["total_requested"] == 0

    def test_auto_assign_without_combinations(self, service, users):
        with pytest.raises(ValidationError, match="No valid"):
            service.auto_assign_agents()


class TestPositions:
    def test_seed_builds_tree(self, service):
        assert service.seed_positions() == 9
        assert service.seed_positions() == 0

        tree = service.position_tree()
        assert len(tree) == 1
        head = tree[0]
        assert head["title"] == "Head of Operations"
        assert [child["division"] for child in head["children"]] == ["RAF", "UIF"]
        team_leader = head["children"][0]["children"][0]["children"][0]
        assert team_leader["children"][0]["title"] == "Agents"


class TestOnboarding:
    def test_status_can_change_once(self, service, hierarchy):
        request = service.create_onboarding_request({
            "first_name": "New",
            "last_name": "Hire",
            "email": "new.hire@example.com",
            "division_id": hierarchy["sales"].id,
            "department_id": hierarchy["floor"].id,
        })
        assert request.status == "pending"

        service.set_onboarding_status(request.id, "approved")
        with pytest.raises(ValidationError, match="already approved"):
            service.set_onboarding_status(request.id, "rejected")
