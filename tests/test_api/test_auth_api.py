"""Tests for login, session tokens and app-level behaviour."""

import pytest

PASSWORD = "secret123"


@pytest.mark.api
def test_login_returns_working_token(client, agent):
    response = client.post(
        "/api/auth/login", json={"email": agent.email.upper(), "password": PASSWORD}
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["tokenType"] == "bearer"
    assert data["user"]["id"] == agent.id
    assert data["user"]["role"] == "agent"
    assert "password" not in data["user"]

    me = client.get("/api/users/me", headers={"Authorization": f"Bearer {data['token']}"})
    assert me.status_code == 200
    assert me.json()["data"]["email"] == agent.email


@pytest.mark.api
def test_login_wrong_password(client, agent):
    response = client.post("/api/auth/login", json={"email": agent.email, "password": "wrong-pass"})

    assert response.status_code == 401
    assert response.json() == {"error": "Invalid email or password", "success": False}


@pytest.mark.api
def test_login_unknown_email(client):
    response = client.post(
        "/api/auth/login", json={"email": "ghost@example.com", "password": PASSWORD}
    )

    assert response.status_code == 401
    assert response.json()["error"] == "Invalid email or password"


@pytest.mark.api
def test_login_disabled_account(client, make_user):
    user = make_user(role="client", is_active=False)

    response = client.post("/api/auth/login", json={"email": user.email, "password": PASSWORD})

    assert response.status_code == 401
    assert response.json()["error"] == "Account is disabled"


@pytest.mark.api
def test_login_rejects_malformed_email(client):
    response = client.post("/api/auth/login", json={"email": "not-an-email", "password": PASSWORD})
    assert response.status_code == 400


@pytest.mark.api
def test_login_rate_limited(client, agent):
    for _ in range(5):
        response = client.post(
            "/api/auth/login", json={"email": agent.email, "password": "wrong-pass"}
        )
        assert response.status_code == 401

    response = client.post("/api/auth/login", json={"email": agent.email, "password": PASSWORD})

    assert response.status_code == 429
    assert int(response.headers["Retry-After"]) > 0
    assert response.json()["success"] is False


@pytest.mark.api
def test_root_and_health(client):
    assert client.get("/").json() == {"message": "Visitae API is running", "success": True}
    response = client.get("/health")
    assert response.json() == {"data": {"status": "healthy"}, "success": True}
    assert "X-Frame-Options" not in response.headers


@pytest.mark.api
def test_unknown_route_uses_error_envelope(client):
    response = client.get("/api/nothing-here")

    assert response.status_code == 404
    assert response.json()["success"] is False


@pytest.mark.api
def test_api_responses_carry_security_headers(client):
    response = client.get("/api/properties")

    assert response.headers["Referrer-Policy"] == "strict-origin-when-cross-origin"
    assert "camera=()" in response.headers["Permissions-Policy"]
    assert response.headers["Cache-Control"].startswith("no-store")
    assert "Strict-Transport-Security" not in response.headers
