from pydantic import Field

from wms.presentation.api.v1.schemas.common import AuditFields, CamelModel


class PermissionResponse(CamelModel):
    id: str
    name: str
    resource: str
    action: str
    code: str
    module: str | None = None
    description: str | None = None


class RoleCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(None, max_length=500)
    permission_ids: list[str] = Field(default_factory=list)


class RoleUpdate(CamelModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, max_length=500)


class AssignPermissionsRequest(CamelModel):
    """Replace the role's permission set"""

    permission_ids: list[str] = Field(default_factory=list)


class RoleResponse(AuditFields):
    id: str
    tenant_id: str | None = None
    name: str
    description: str | None = None
    is_system_role: bool
    user_count: int = 0
    permissions: list[PermissionResponse] = Field(default_factory=list)

    @classmethod
    def from_orm_model(cls, role, user_count: int = 0) -> "RoleResponse":
        return cls(
            id=role.id,
            tenant_id=role.tenant_id,
            name=role.name,
            description=role.description,
            is_system_role=role.is_system_role,
            user_count=user_count,
            permissions=[PermissionResponse.model_validate(p) for p in role.permissions],
            created_at=role.created_at,
            updated_at=role.updated_at,
            created_by=role.created_by,
            updated_by=role.updated_by,
        )
