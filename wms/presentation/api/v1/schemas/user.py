from datetime import datetime

from pydantic import EmailStr, Field

from wms.presentation.api.v1.schemas.common import CamelModel, NewPassword


class UserCreate(CamelModel):
    """Schema for an administrator creating a user"""

    username: str = Field(..., min_length=3, max_length=100)
    email: EmailStr
    password: NewPassword
    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    phone: str | None = Field(None, max_length=50)
    role_ids: list[str] = Field(default_factory=list)
    is_active: bool = True


class UserUpdate(CamelModel):
    """Only the fields that are sent are changed"""

    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    phone: str | None = Field(None, max_length=50)
    email: EmailStr | None = None
    is_active: bool | None = None


class UserResponse(CamelModel):
    """User without credentials or tokens"""

    id: str
    tenant_id: str | None = None
    username: str
    email: str
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None
    is_active: bool
    email_confirmed: bool
    last_login_at: datetime | None = None
    created_at: datetime
    roles: list[str] = Field(default_factory=list)
    permissions: list[str] = Field(default_factory=list)

    @classmethod
    def from_orm_model(
        cls, user, roles: list[str] | None = None, permissions: list[str] | None = None
    ) -> "UserResponse":
        """Convert ORM model to response schema"""
        return cls(
            id=user.id,
            tenant_id=user.tenant_id,
            username=user.username,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            phone=user.phone,
            is_active=bool(user.is_active),
            email_confirmed=bool(user.email_confirmed),
            last_login_at=user.last_login_at,
            created_at=user.created_at,
            roles=roles if roles is not None else user.role_names,
            permissions=permissions or [],
        )


class DeletedUserResponse(UserResponse):
    deleted_at: datetime | None = None
    deleted_by: str | None = None

    @classmethod
    def from_orm_model(cls, user, roles=None, permissions=None) -> "DeletedUserResponse":
        base = UserResponse.from_orm_model(user, roles, permissions)
        return cls(**base.model_dump(), deleted_at=user.deleted_at, deleted_by=user.deleted_by)


class AssignRolesRequest(CamelModel):
    """Replace the user's role set"""

    role_ids: list[str] = Field(default_factory=list)
