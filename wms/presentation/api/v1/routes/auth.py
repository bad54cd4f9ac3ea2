from typing import Annotated

from fastapi import APIRouter, Depends, Request, status

from wms.application.services.authentication_service import (
    AuthenticationResult, AuthenticationService)
from wms.infrastructure.config.settings import get_settings
from wms.presentation.api.dependencies import (
    get_authentication_service_transactional, get_current_context)
from wms.presentation.api.errors import failure_response
from wms.presentation.api.v1.schemas.auth import (AuthenticationResponse,
                                                  ChangePasswordRequest,
                                                  LoginRequest,
                                                  RefreshTokenRequest,
                                                  RegisterRequest)
from wms.presentation.api.v1.schemas.common import MessageResponse
from wms.presentation.api.v1.schemas.user import UserResponse
from wms.presentation.middleware.rate_limit import limiter
from wms.shared.context import RequestContext

router = APIRouter()
settings = get_settings()


def _to_response(issued: AuthenticationResult) -> AuthenticationResponse:
    return AuthenticationResponse(
        access_token=issued.access_token,
        refresh_token=issued.refresh_token,
        expires_at=issued.expires_at,
        user=UserResponse.from_orm_model(issued.user, issued.roles, issued.permissions),
    )


@router.post("/login", response_model=AuthenticationResponse)
@limiter.limit(settings.login_rate_limit)
async def login(
    request: Request,  # Required by slowapi for rate limiting (extracts remote address)
    data: LoginRequest,
    auth_service: Annotated[
        AuthenticationService, Depends(get_authentication_service_transactional)
    ],
):
    """
    Exchange username (or email) and password for a token pair.

    Unknown users and wrong passwords get the same 401 response. Five
    consecutive failures lock the account for 30 minutes.
    """
    result = await auth_service.login(data.username, data.password, data.remember_me)
    if result.is_failure:
        return failure_response(result)
    assert result.value is not None
    return _to_response(result.value)


@router.post(
    "/register", response_model=AuthenticationResponse, status_code=status.HTTP_201_CREATED
)
@limiter.limit(settings.register_rate_limit)
async def register(
    request: Request,
    data: RegisterRequest,
    auth_service: Annotated[
        AuthenticationService, Depends(get_authentication_service_transactional)
    ],
):
    """Self-registration; optionally joins an active tenant by slug"""
    result = await auth_service.register(
        username=data.username,
        email=data.email,
        password=data.password,
        confirm_password=data.confirm_password,
        first_name=data.first_name,
        last_name=data.last_name,
        phone=data.phone,
        tenant_slug=data.tenant_slug,
    )
    if result.is_failure:
        return failure_response(result)
    assert result.value is not None
    return _to_response(result.value)


@router.post("/refresh-token", response_model=AuthenticationResponse)
async def refresh_token(
    data: RefreshTokenRequest,
    auth_service: Annotated[
        AuthenticationService, Depends(get_authentication_service_transactional)
    ],
):
    """Rotate the token pair; the presented refresh token is consumed"""
    result = await auth_service.refresh(data.refresh_token)
    if result.is_failure:
        return failure_response(result)
    assert result.value is not None
    return _to_response(result.value)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    context: Annotated[RequestContext, Depends(get_current_context)],
    auth_service: Annotated[
        AuthenticationService, Depends(get_authentication_service_transactional)
    ],
):
    """Revoke the stored refresh token"""
    assert context.user_id is not None
    result = await auth_service.logout(context.user_id)
    if result.is_failure:
        return failure_response(result)
    return MessageResponse(message="Logged out successfully")


@router.post("/change-password", response_model=MessageResponse)
async def change_password(
    data: ChangePasswordRequest,
    context: Annotated[RequestContext, Depends(get_current_context)],
    auth_service: Annotated[
        AuthenticationService, Depends(get_authentication_service_transactional)
    ],
):
    assert context.user_id is not None
    result = await auth_service.change_password(
        context.user_id, data.current_password, data.new_password, data.confirm_new_password
    )
    if result.is_failure:
        return failure_response(result)
    return MessageResponse(message="Password changed successfully")
