from datetime import datetime

from pydantic import EmailStr, Field, field_validator

from wms.presentation.api.v1.schemas.common import AuditFields, CamelModel


class TenantCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    slug: str = Field(..., min_length=2, max_length=100, description="URL-safe identifier")
    domain: str | None = Field(None, max_length=255)
    contact_email: EmailStr | None = None
    contact_phone: str | None = Field(None, max_length=50)
    address: str | None = None
    subscription_start_date: datetime | None = None
    subscription_end_date: datetime | None = None
    max_users: int = Field(10, ge=1)

    @field_validator("slug")
    @classmethod
    def validate_slug(cls, v: str) -> str:
        """Lowercase letters, digits and hyphens"""
        if not v.replace("-", "").isalnum():
            raise ValueError("Slug must contain only alphanumeric characters and hyphens")
        return v.lower()


class TenantUpdate(CamelModel):
    name: str | None = Field(None, min_length=1, max_length=200)
    contact_email: EmailStr | None = None
    contact_phone: str | None = Field(None, max_length=50)
    address: str | None = None
    is_active: bool | None = None


class TenantResponse(AuditFields):
    id: str
    name: str
    slug: str
    domain: str | None = None
    is_active: bool
    contact_email: str | None = None
    contact_phone: str | None = None
    address: str | None = None
    subscription_start_date: datetime | None = None
    subscription_end_date: datetime | None = None
    max_users: int
