"""Test authentication endpoints"""

from datetime import datetime, timezone

import pytest
from fastapi import status

from tests.helpers import ADMIN_PASSWORD
from wms.infrastructure.security.jwt import verify_token
from wms.presentation.middleware.rate_limit import limiter

LOGIN_URL = "/api/v1/auth/login"


@pytest.mark.asyncio
async def test_login_success(client, seeded):
    """Test successful login returns camelCase token pair and user"""
    response = await client.post(LOGIN_URL, json={"username": "admin", "password": ADMIN_PASSWORD})

    assert response.status_code == 200
    data = response.json()
    assert data["tokenType"] == "Bearer"
    assert data["refreshToken"]
    assert "expiresAt" in data
    assert data["user"]["username"] == "admin"
    assert data["user"]["roles"] == ["Admin"]
    assert "*:*" in data["user"]["permissions"]
    assert verify_token(data["accessToken"])["tenant_id"] == seeded.tenant.id


@pytest.mark.asyncio
async def test_login_failures_are_byte_identical(client, seeded, monkeypatch):
    """Unknown user and wrong password must not be distinguishable"""
    fixed = datetime(2026, 1, 1, tzinfo=timezone.utc)
    monkeypatch.setattr("wms.presentation.api.errors.utc_now", lambda: fixed)
    headers = {"X-Correlation-ID": "login-trace"}

    unknown = await client.post(
        LOGIN_URL, json={"username": "ghost", "password": "whatever"}, headers=headers
    )
    wrong = await client.post(
        LOGIN_URL, json={"username": "admin", "password": "whatever"}, headers=headers
    )

    assert unknown.status_code == wrong.status_code == status.HTTP_401_UNAUTHORIZED
    assert unknown.content == wrong.content
    assert unknown.headers["www-authenticate"] == "Bearer"
    body = unknown.json()
    assert body["statusCode"] == 401
    assert body["message"] == "Invalid username or password"
    assert body["traceId"] == "login-trace"


@pytest.mark.asyncio
async def test_unknown_user_is_unauthorized(client, seeded, monkeypatch):
    monkeypatch.setattr(
        "wms.application.services.authentication_service._DUMMY_PASSWORD_HASH", None
    )

    response = await client.post(
        LOGIN_URL, json={"username": "nobody", "password": "Whatever@123"}
    )

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["message"] == "Invalid username or password"


@pytest.mark.asyncio
async def test_lockout_persists_across_requests(client, seeded):
    for _ in range(5):
        response = await client.post(LOGIN_URL, json={"username": "admin", "password": "nope"})
        assert response.status_code == 401

    response = await client.post(LOGIN_URL, json={"username": "admin", "password": ADMIN_PASSWORD})

    assert response.status_code == 401
    assert response.json()["message"] == "Account is locked. Please try again later"


@pytest.mark.asyncio
async def test_login_validation_error(client):
    response = await client.post(LOGIN_URL, json={"username": "admin"})

    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "One or more validation errors occurred"
    assert "password" in body["errors"]


@pytest.mark.asyncio
async def test_refresh_token_rotation(client, seeded):
    login = await client.post(LOGIN_URL, json={"username": "admin", "password": ADMIN_PASSWORD})
    first = login.json()["refreshToken"]

    refreshed = await client.post("/api/v1/auth/refresh-token", json={"refreshToken": first})
    assert refreshed.status_code == 200
    assert refreshed.json()["refreshToken"] != first

    replay = await client.post("/api/v1/auth/refresh-token", json={"refreshToken": first})
    assert replay.status_code == 401
    assert replay.json()["message"] == "Invalid or expired refresh token"


@pytest.mark.asyncio
async def test_register(client, seeded):
    response = await client.post(
        "/api/v1/auth/register",
        json={
            "username": "newcomer",
            "email": "newcomer@example.com",
            "password": "Newcomer@1",
            "confirmPassword": "Newcomer@1",
            "tenantSlug": "wms-default",
        },
    )

    assert response.status_code == 201
    data = response.json()
    assert data["user"]["tenantId"] == seeded.tenant.id
    assert data["user"]["roles"] == []


@pytest.mark.asyncio
async def test_register_duplicate_username(client, seeded):
    response = await client.post(
        "/api/v1/auth/register",
        json={
            "username": "admin",
            "email": "another@example.com",
            "password": "Newcomer@1",
            "confirmPassword": "Newcomer@1",
        },
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Username already exists"


@pytest.mark.asyncio
async def test_register_rejects_password_over_bcrypt_limit(client, seeded):
    """Fewer than 72 characters but more than 72 bytes"""
    password = "Sénha" * 14
    response = await client.post(
        "/api/v1/auth/register",
        json={
            "username": "longpass",
            "email": "longpass@example.com",
            "password": password,
            "confirmPassword": password,
        },
    )

    assert response.status_code == 400
    assert "password" in response.json()["errors"]


@pytest.mark.asyncio
async def test_logout_requires_authentication(client):
    response = await client.post("/api/v1/auth/logout")

    assert response.status_code == 401
    assert response.json()["message"] == "Not authenticated"


@pytest.mark.asyncio
async def test_logout_revokes_refresh_token(client, seeded, admin_headers):
    login = await client.post(LOGIN_URL, json={"username": "admin", "password": ADMIN_PASSWORD})
    refresh = login.json()["refreshToken"]

    response = await client.post("/api/v1/auth/logout", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Logged out successfully"

    replay = await client.post("/api/v1/auth/refresh-token", json={"refreshToken": refresh})
    assert replay.status_code == 401


@pytest.mark.asyncio
async def test_change_password(client, seeded, admin_headers):
    response = await client.post(
        "/api/v1/auth/change-password",
        headers=admin_headers,
        json={
            "currentPassword": ADMIN_PASSWORD,
            "newPassword": "Changed@123",
            "confirmNewPassword": "Changed@123",
        },
    )
    assert response.status_code == 200

    relogin = await client.post(LOGIN_URL, json={"username": "admin", "password": "Changed@123"})
    assert relogin.status_code == 200


@pytest.mark.asyncio
async def test_invalid_bearer_token(client):
    response = await client.get("/api/v1/users/me", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid authentication credentials"


@pytest.mark.asyncio
async def test_rate_limiting_login(client, seeded):
    """Test that login endpoint is rate limited"""
    limiter.reset()
    limiter.enabled = True
    try:
        # Make 6 failed login attempts (rate limit is 5/minute)
        for i in range(6):
            response = await client.post(LOGIN_URL, json={"username": "ghost", "password": "x"})
            if i < 5:
                assert response.status_code == status.HTTP_401_UNAUTHORIZED
            else:
                assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS
                assert response.json()["message"].startswith("Rate limit exceeded")
    finally:
        limiter.enabled = False
        limiter.reset()
