"""Tests for access and refresh token handling"""

from datetime import timedelta

import pytest
from jose import jwt

from wms.infrastructure.config.settings import get_settings
from wms.infrastructure.security.jwt import (create_access_token,
                                             generate_refresh_token,
                                             verify_token)

settings = get_settings()


def test_access_token_round_trip_carries_claims():
    token = create_access_token(
        {"sub": "user-1", "tenant_id": "tenant-1", "roles": ["Admin"], "permissions": ["*:*"]}
    )

    payload = verify_token(token)

    assert payload["sub"] == "user-1"
    assert payload["tenant_id"] == "tenant-1"
    assert payload["roles"] == ["Admin"]
    assert payload["permissions"] == ["*:*"]
    assert payload["iss"] == settings.jwt_issuer
    assert payload["aud"] == settings.jwt_audience
    assert payload["jti"]
    assert payload["exp"] > payload["iat"]


def test_each_token_gets_unique_jti():
    first = verify_token(create_access_token({"sub": "user-1"}))
    second = verify_token(create_access_token({"sub": "user-1"}))

    assert first["jti"] != second["jti"]


def test_expired_token_is_rejected():
    token = create_access_token({"sub": "user-1"}, expires_delta=timedelta(seconds=-5))

    with pytest.raises(ValueError):
        verify_token(token)


def test_token_signed_with_other_key_is_rejected():
    token = jwt.encode(
        {"sub": "user-1", "iss": settings.jwt_issuer, "aud": settings.jwt_audience},
        "another-secret-key-with-enough-length-123",
        algorithm=settings.algorithm,
    )

    with pytest.raises(ValueError):
        verify_token(token)


def test_token_for_other_audience_is_rejected():
    token = jwt.encode(
        {"sub": "user-1", "iss": settings.jwt_issuer, "aud": "someone-else"},
        settings.secret_key,
        algorithm=settings.algorithm,
    )

    with pytest.raises(ValueError):
        verify_token(token)


def test_tampered_payload_is_rejected():
    token = create_access_token({"sub": "user-1"})
    forged = create_access_token({"sub": "admin"})
    header, _, signature = token.split(".")
    tampered = ".".join([header, forged.split(".")[1], signature])

    with pytest.raises(ValueError):
        verify_token(tampered)


def test_refresh_tokens_are_opaque_and_unique():
    first = generate_refresh_token()
    second = generate_refresh_token()

    assert first != second
    assert len(first) >= 64
    assert "." not in first  # not a JWT
