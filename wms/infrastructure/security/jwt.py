"""JWT token handling for authentication."""

from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from wms.infrastructure.config.settings import get_settings
from wms.shared.utils import generate_cuid, generate_opaque_token

settings = get_settings()


def create_access_token(
    data: dict[str, Any], expires_delta: timedelta | None = None
) -> str:
    """
    Create a signed access token.

    ``data`` carries the identity claims (sub, tenant_id, roles, ...).
    Issuer, audience, a unique jti and the iat/exp timestamps are added here.
    """
    to_encode = data.copy()
    now = datetime.now(UTC)

    if expires_delta:
        expire = now + expires_delta
    else:
        expire = now + timedelta(minutes=settings.access_token_expire_minutes)

    to_encode.update(
        {
            "exp": expire,
            "iat": now,
            "jti": generate_cuid(),
            "iss": settings.jwt_issuer,
            "aud": settings.jwt_audience,
        }
    )
    encoded_jwt = jwt.encode(
        to_encode, settings.secret_key, algorithm=settings.algorithm
    )
    assert isinstance(encoded_jwt, str)
    return encoded_jwt


def verify_token(token: str) -> dict[str, Any]:
    """Verify signature, expiry, issuer and audience; returns payload"""
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.algorithm],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
        )
        if not isinstance(payload, dict):
            raise TypeError("Token payload must be a dictionary")
        return payload
    except JWTError as e:
        raise ValueError(f"Invalid token: {str(e)}") from e


def generate_refresh_token() -> str:
    """Opaque refresh token. Never a JWT, so it cannot be decoded client-side."""
    return generate_opaque_token(64)
