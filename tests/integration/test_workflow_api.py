"""Attendance, transfers, terminations, notifications and bulk assignments over HTTP."""

from datetime import date


def test_clock_in_and_out(test_client, login, users):
    """Employees clock themselves in and out once per day."""
    headers = login("agent")
    response = test_client.post("/api/attendance/clock-in", headers=headers)
    assert response.status_code == 200
    assert response.json()["status"] == "present"

    again = test_client.post("/api/attendance/clock-in", headers=headers)
    assert again.status_code == 400
    assert again.json()["detail"] == "Already clocked in today"

    response = test_client.post("/api/attendance/clock-out", headers=headers)
    assert response.status_code == 200
    assert response.json()["clock_out"] is not None


def test_clock_in_for_user_limited_to_team(test_client, login, users):
    """Team leaders record attendance for their own team only."""
    headers = login("leader")
    ok = test_client.post(
        "/api/attendance/clock-in-for-user", headers=headers,
        json={"user_id": users["agent"].id, "status": "late", "reason": "Traffic"},
    )
    assert ok.status_code == 200

    denied = test_client.post(
        "/api/attendance/clock-in-for-user", headers=headers, json={"user_id": users["other_agent"].id}
    )
    assert denied.status_code == 403

    today = test_client.get("/api/attendance/today", headers=login("hr")).json()
    assert [(row["username"], row["status"]) for row in today] == [("agent", "late")]


def test_attendance_range_validation(test_client, login, users):
    response = test_client.get(
        "/api/attendance/range", headers=login("hr"), params={"start": "2026-03-05", "end": "2026-03-01"}
    )
    assert response.status_code == 400


def test_agent_reads_only_own_attendance(test_client, login, users):
    headers = login("agent")
    assert test_client.get(f"/api/attendance/user/{users['agent'].id}", headers=headers).status_code == 200
    assert test_client.get(f"/api/attendance/user/{users['other_agent'].id}", headers=headers).status_code == 403


def test_transfer_workflow(test_client, login, users):
    """Team leader requests, HR approves, the requester is notified."""
    leader = login("leader")
    response = test_client.post(
        "/api/transfers",
        headers=leader,
        json={
            "user_id": users["agent"].id,
            "transfer_type": "temporary",
            "start_date": "2026-04-01",
            "end_date": "2026-04-30",
            "reason": "Campaign cover",
        },
    )
    assert response.status_code == 201
    transfer_id = response.json()["id"]

    hr = login("hr")
    assert test_client.get("/api/notifications/unread-count", headers=hr).json()["count"] == 1

    assert test_client.patch(f"/api/transfers/{transfer_id}/approve", headers=leader, json={}).status_code == 403
    approved = test_client.patch(f"/api/transfers/{transfer_id}/approve", headers=hr, json={"comment": "OK"})
    assert approved.status_code == 200
    assert approved.json()["status"] == "approved"

    again = test_client.patch(f"/api/transfers/{transfer_id}/reject", headers=hr, json={})
    assert again.status_code == 400

    inbox = test_client.get("/api/notifications", headers=leader).json()
    assert inbox[0]["title"] == "Transfer Request Approved"

    audit = test_client.get(f"/api/transfers/{transfer_id}/audit", headers=hr).json()
    assert [entry["action"] for entry in audit] == ["approved", "created"]


def test_temporary_transfer_without_end_date(test_client, login, users):
    response = test_client.post(
        "/api/transfers",
        headers=login("hr"),
        json={"user_id": users["agent"].id, "transfer_type": "temporary", "start_date": "2026-04-01"},
    )
    assert response.status_code == 422


def test_termination(test_client, login, users, password):
    """A termination deactivates the employee and blocks a second record."""
    hr = login("hr")
    body = {
        "user_id": users["agent"].id,
        "status_type": "resignation",
        "termination_date": date.today().isoformat(),
        "comment": "Relocating",
    }
    response = test_client.post("/api/terminations", headers=hr, json=body)
    assert response.status_code == 201

    duplicate = test_client.post("/api/terminations", headers=hr, json=body)
    assert duplicate.status_code == 400

    login_attempt = test_client.post("/api/auth/login", json={"username": "agent", "password": password})
    assert login_attempt.status_code == 401

    inbox = test_client.get("/api/notifications", headers=login("leader")).json()
    assert inbox[0]["title"] == "Agent Resignation Notice"
    assert inbox[0]["action_url"] == "/team-leader"


def test_notifications_read(test_client, login, users):
    """Users can only mark their own notifications as read."""
    test_client.post(
        "/api/terminations",
        headers=login("hr"),
        json={"user_id": users["other_agent"].id, "status_type": "AWOL", "termination_date": date.today().isoformat()},
    )
    admin = login("admin")
    notes = test_client.get("/api/notifications", headers=admin).json()
    assert notes and notes[0]["severity"] == "urgent"

    foreign = test_client.patch(f"/api/notifications/{notes[0]['id']}/read", headers=login("leader"))
    assert foreign.status_code == 404

    own = test_client.patch(f"/api/notifications/{notes[0]['id']}/read", headers=admin)
    assert own.status_code == 200
    assert own.json()["is_read"] is True

    assert test_client.patch("/api/notifications/read-all", headers=login("hr")).json()["updated"] >= 1
    assert test_client.get("/api/notifications/unread-count", headers=login("hr")).json()["count"] == 0


def test_bulk_assignments(test_client, auth_headers, users):
    """Bulk assignment reports each user's outcome."""
    division = test_client.post("/api/divisions", headers=auth_headers, json={"name": "Telesales"}).json()
    department = test_client.post(
        "/api/departments", headers=auth_headers, json={"name": "Sales Floor", "division_id": division["id"]}
    ).json()

    payload = {
        "user_ids": [users["agent"].id, 9999],
        "division_id": division["id"],
        "department_id": department["id"],
    }
    response = test_client.post("/api/user-department-assignments/bulk", headers=auth_headers, json=payload)
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Partial success: 1 succeeded, 1 failed"
    assignment_id = next(r["assignment_id"] for r in body["results"] if r["success"])

    response = test_client.post(
        "/api/user-department-assignments/bulk-delete",
        headers=auth_headers,
        json={"assignment_ids": [assignment_id]},
    )
    assert response.json()["message"] == "All 1 succeeded"


def test_team_membership(test_client, login, users):
    """HR adds and removes team members; duplicates are rejected."""
    hr = login("hr")
    body = {"team_id": users["team"].id, "user_id": users["other_agent"].id}
    assert test_client.post("/api/team-members", headers=hr, json=body).status_code == 201

    duplicate = test_client.post("/api/team-members", headers=hr, json=body)
    assert duplicate.status_code == 400
    assert duplicate.json()["detail"] == "User is already a member of this team"

    removed = test_client.delete(f"/api/teams/{users['team'].id}/members/{users['other_agent'].id}", headers=hr)
    assert removed.status_code == 200

    titles = [n["title"] for n in test_client.get("/api/notifications", headers=login("leader")).json()]
    assert sorted(titles) == ["Agent Removed from Your Team", "New Agent Added to Your Team"]
