"""
Name: Auth API Tests

Responsibilities:
  - Register, login (bearer + cookie), me, logout
  - Credential failures share one 401 message; inactive users get 403
  - The session cookie alone authenticates estate routes
"""

import pytest

from conftest import TEST_PASSWORD, make_user

pytestmark = pytest.mark.unit


def test_register_then_login(client):
    registered = client.post(
        "/api/auth/register",
        json={"email": " New@Example.com ", "password": "long-enough", "name": "New"},
    )
    login = client.post(
        "/api/auth/login", json={"email": "new@example.com", "password": "long-enough"}
    )

    assert registered.status_code == 201
    assert registered.json()["email"] == "new@example.com"
    assert login.status_code == 200
    assert login.json()["tokenType"] == "bearer"
    assert "legatepro_session" in login.cookies


def test_register_duplicate_email(client, owner):
    res = client.post(
        "/api/auth/register", json={"email": owner.email, "password": "long-enough"}
    )

    assert res.status_code == 409
    assert res.json()["code"] == "CONFLICT"


def test_bad_credentials(client, owner):
    wrong = client.post(
        "/api/auth/login", json={"email": owner.email, "password": "nope"}
    )
    unknown = client.post(
        "/api/auth/login", json={"email": "ghost@example.com", "password": "nope"}
    )

    assert wrong.status_code == unknown.status_code == 401
    assert wrong.json()["error"] == unknown.json()["error"] == "Invalid credentials"


def test_inactive_user(client):
    make_user("u-gone", "gone@example.com", is_active=False)

    res = client.post(
        "/api/auth/login", json={"email": "gone@example.com", "password": TEST_PASSWORD}
    )

    assert res.status_code == 403


def test_me(client, owner, headers_for):
    assert client.get("/api/auth/me").status_code == 401

    res = client.get("/api/auth/me", headers=headers_for(owner))

    assert res.json()["id"] == owner.id


def test_cookie_session_reaches_estate_routes(client, estate, owner):
    client.post("/api/auth/login", json={"email": owner.email, "password": TEST_PASSWORD})

    res = client.get("/api/estates")

    assert res.status_code == 200
    assert [e["id"] for e in res.json()["estates"]] == ["e1"]


def test_logout_clears_cookie(client, estate, owner):
    client.post("/api/auth/login", json={"email": owner.email, "password": TEST_PASSWORD})
    client.post("/api/auth/logout")

    assert client.get("/api/estates").status_code == 401


def test_garbage_token_is_anonymous(client, estate):
    res = client.get("/api/estates", headers={"Authorization": "Bearer not-a-jwt"})

    assert res.status_code == 401
