from datetime import datetime

from pydantic import EmailStr, Field

from wms.presentation.api.v1.schemas.common import CamelModel, NewPassword
from wms.presentation.api.v1.schemas.user import UserResponse


class LoginRequest(CamelModel):
    """Username or email plus password"""

    username: str = Field(..., min_length=1, max_length=255, description="Username or email")
    password: str = Field(..., min_length=1, max_length=128)
    remember_me: bool = False


class RegisterRequest(CamelModel):
    username: str = Field(..., min_length=3, max_length=100)
    email: EmailStr
    password: NewPassword
    confirm_password: str = Field(..., min_length=1, max_length=72)
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    phone: str | None = Field(None, max_length=50)
    tenant_slug: str | None = Field(None, max_length=100, description="Tenant to join")


class RefreshTokenRequest(CamelModel):
    refresh_token: str = Field(..., min_length=1, max_length=500)


class ChangePasswordRequest(CamelModel):
    current_password: str = Field(..., min_length=1, max_length=128)
    new_password: NewPassword
    confirm_new_password: str = Field(..., min_length=1, max_length=72)


class AuthenticationResponse(CamelModel):
    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_at: datetime
    user: UserResponse
