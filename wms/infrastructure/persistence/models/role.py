from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from wms.domain.exceptions import RoleInUseException, SystemRoleModificationError
from wms.infrastructure.persistence.database import Base
from wms.infrastructure.persistence.models.mixins import (BaseEntityMixin,
                                                          CuidMixin,
                                                          OptionalTenantMixin,
                                                          active_rows_where,
                                                          require_text)

if TYPE_CHECKING:
    from wms.infrastructure.persistence.models.permission import (Permission,
                                                                  RolePermission)


class Role(CuidMixin, OptionalTenantMixin, BaseEntityMixin, Base):
    """
    Named bundle of permissions (e.g., 'Admin', 'WarehouseManager').

    tenant_id NULL means the role is global. System roles are protected:
    every mutating method below raises SystemRoleModificationError before
    touching any attribute.
    """

    __tablename__ = "role"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_system_role: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    role_permissions: Mapped[list[RolePermission]] = relationship(
        "RolePermission",
        back_populates="role",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __table_args__ = (
        Index(
            "uq_role_tenant_name_active",
            "tenant_id",
            "name",
            unique=True,
            **active_rows_where(),
        ),
        # NULLs never collide in the index above, so global names need their own
        Index(
            "uq_role_global_name_active",
            "name",
            unique=True,
            **active_rows_where("tenant_id IS NULL"),
        ),
    )

    @validates("name")
    def _validate_name(self, key: str, value: str) -> str:
        return require_text(value, key)

    @property
    def permissions(self) -> list[Permission]:
        return [rp.permission for rp in self.role_permissions if not rp.permission.is_deleted]

    @property
    def permission_codes(self) -> list[str]:
        return sorted(p.code for p in self.permissions)

    def ensure_mutable(self, operation: str) -> None:
        if self.is_system_role:
            raise SystemRoleModificationError(self.name, operation)

    def update(self, actor: str | None, name: str, description: str | None) -> None:
        self.ensure_mutable("updated")
        self.name = name
        self.description = description
        self.touch(actor)

    def assign_permission(self, permission: Permission, actor: str | None) -> None:
        """Grant a permission; granting one the role already has is a no-op"""
        from wms.infrastructure.persistence.models.permission import RolePermission

        self.ensure_mutable("reassigned permissions")
        if any(rp.permission_id == permission.id for rp in self.role_permissions):
            return
        self.role_permissions.append(
            RolePermission(permission=permission, permission_id=permission.id, assigned_by=actor)
        )
        self.touch(actor)

    def remove_permission(self, permission_id: str, actor: str | None) -> None:
        self.ensure_mutable("reassigned permissions")
        self.role_permissions = [
            rp for rp in self.role_permissions if rp.permission_id != permission_id
        ]
        self.touch(actor)

    def replace_permissions(self, permissions: list[Permission], actor: str | None) -> None:
        """Make the role's permission set exactly ``permissions``"""
        self.ensure_mutable("reassigned permissions")
        wanted = {p.id: p for p in permissions}
        self.role_permissions = [
            rp for rp in self.role_permissions if rp.permission_id in wanted
        ]
        for permission in wanted.values():
            self.assign_permission(permission, actor)
        self.touch(actor)

    def ensure_deletable(self, assigned_user_count: int) -> None:
        self.ensure_mutable("deleted")
        if assigned_user_count > 0:
            raise RoleInUseException(self.name, assigned_user_count)

    def mark_as_deleted(self, actor: str | None) -> None:
        self.ensure_mutable("deleted")
        super().mark_as_deleted(actor)
