"""User directory endpoints and role-based access."""

from shared.constants import SAFE_USER_FIELDS


def test_admin_sees_full_records(test_client, auth_headers):
    """Admins get every field, including reports_to."""
    response = test_client.get("/api/users", headers=auth_headers)
    assert response.status_code == 200
    agent = next(u for u in response.json() if u["username"] == "agent")
    assert "reports_to" in agent
    assert "email" in agent


def test_team_leader_sees_safe_fields(test_client, login, users):
    """Non-admin directory readers get the restricted record only."""
    response = test_client.get("/api/users", headers=login("leader"))
    assert response.status_code == 200
    for user in response.json():
        assert set(user) == set(SAFE_USER_FIELDS)


def test_agent_cannot_list_users(test_client, login, users):
    """Agents have no access to the directory."""
    response = test_client.get("/api/users", headers=login("agent"))
    assert response.status_code == 403


def test_create_user(test_client, auth_headers):
    """Admin creates a user; the username is normalised."""
    response = test_client.post(
        "/api/users",
        headers=auth_headers,
        json={"username": " NewAgent ", "password": "strong1", "first_name": "New", "role": "agent"},
    )
    assert response.status_code == 201
    body = response.json()
    assert body["username"] == "newagent"
    assert "password_hash" not in body


def test_create_user_duplicate(test_client, auth_headers):
    """Taken usernames are rejected with 400."""
    response = test_client.post(
        "/api/users",
        headers=auth_headers,
        json={"username": "agent", "password": "strong1"},
    )
    assert response.status_code == 400
    assert "already taken" in response.json()["detail"]


def test_create_user_short_password(test_client, auth_headers):
    """Passwords under 6 characters fail validation."""
    response = test_client.post(
        "/api/users",
        headers=auth_headers,
        json={"username": "shorty", "password": "123"},
    )
    assert response.status_code == 422


def test_get_missing_user(test_client, auth_headers):
    assert test_client.get("/api/users/9999", headers=auth_headers).status_code == 404


def test_admin_cannot_delete_self(test_client, auth_headers, users):
    response = test_client.delete(f"/api/users/{users['admin'].id}", headers=auth_headers)
    assert response.status_code == 400


def test_delete_user(test_client, auth_headers, users):
    """Deleting a user removes them from the directory."""
    response = test_client.delete(f"/api/users/{users['other_agent'].id}", headers=auth_headers)
    assert response.status_code == 200
    assert test_client.get(f"/api/users/{users['other_agent'].id}", headers=auth_headers).status_code == 404


def test_reassign_team_leader(test_client, login, users):
    """Admin moves an agent into a leader's team."""
    response = test_client.post(
        f"/api/users/{users['other_agent'].id}/reassign-team-leader",
        headers=login("admin"),
        json={"team_leader_id": users["team_leader"].id},
    )
    assert response.status_code == 200
    assert response.json()["id"] == users["team"].id

    teams = test_client.get(f"/api/users/{users['other_agent'].id}/teams", headers=login("admin"))
    assert [t["id"] for t in teams.json()] == [users["team"].id]


def test_team_leaders_list(test_client, login, users):
    response = test_client.get("/api/team-leaders", headers=login("hr"))
    assert response.status_code == 200
    assert [u["username"] for u in response.json()] == ["leader"]
