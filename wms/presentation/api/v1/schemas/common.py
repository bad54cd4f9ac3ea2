from datetime import datetime
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from wms.infrastructure.security.password import MAX_PASSWORD_BYTES


def _check_password_bytes(value: str) -> str:
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must not exceed {MAX_PASSWORD_BYTES} bytes")
    return value


# Passwords that will be hashed; bcrypt rejects input over 72 bytes
NewPassword = Annotated[
    str, Field(min_length=8, max_length=MAX_PASSWORD_BYTES), AfterValidator(_check_password_bytes)
]


class CamelModel(BaseModel):
    """Base schema: snake_case in Python, camelCase on the wire"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class AuditFields(CamelModel):
    """Bookkeeping columns shared by every entity response"""

    created_at: datetime
    updated_at: datetime | None = None
    created_by: str | None = None
    updated_by: str | None = None


class DeletedFields(AuditFields):
    is_deleted: bool = False
    deleted_at: datetime | None = None
    deleted_by: str | None = None


class ErrorResponse(CamelModel):
    """Error envelope returned by every failing endpoint"""

    status_code: int
    message: str
    errors: dict[str, list[str]] | list[str] | None = None
    timestamp: datetime
    trace_id: str | None = None


class MessageResponse(CamelModel):
    message: str
    data: dict[str, Any] | None = Field(default=None)
