"""Login, token refresh and the current-user endpoint."""


def test_login_returns_token_pair(test_client, users, password):
    """Login issues an access and a refresh token."""
    response = test_client.post("/api/auth/login", json={"username": "Admin ", "password": password})
    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["access_token"] and body["refresh_token"]
    assert body["expires_in"] > 0


def test_login_wrong_password(test_client, users):
    """Wrong password is rejected."""
    response = test_client.post("/api/auth/login", json={"username": "admin", "password": "nope"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Incorrect username or password"


def test_login_inactive_user(test_client, db_session, users, password):
    """Deactivated accounts cannot log in."""
    users["agent"].is_active = False
    db_session.commit()
    response = test_client.post("/api/auth/login", json={"username": "agent", "password": password})
    assert response.status_code == 401


def test_current_user(test_client, login, users):
    """Both /user and /me return the caller."""
    headers = login("hr")
    for path in ("/api/auth/user", "/api/auth/me"):
        response = test_client.get(path, headers=headers)
        assert response.status_code == 200
        assert response.json()["username"] == "hr"


def test_requires_token(test_client, users):
    """Protected endpoints reject anonymous requests."""
    assert test_client.get("/api/auth/user").status_code == 401


def test_refresh(test_client, users, password):
    """A refresh token yields a new pair; an access token does not."""
    tokens = test_client.post(
        "/api/auth/login", json={"username": "leader", "password": password}
    ).json()

    response = test_client.post("/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert response.status_code == 200
    assert response.json()["access_token"]

    response = test_client.post("/api/auth/refresh", json={"refresh_token": tokens["access_token"]})
    assert response.status_code == 401


def test_health(test_client):
    """Health endpoint needs no auth."""
    response = test_client.get("/health")
    assert response.status_code == 200
