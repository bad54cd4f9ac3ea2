from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from wms.infrastructure.persistence.database import Base
from wms.infrastructure.persistence.models.mixins import (BaseEntityMixin,
                                                          CuidMixin,
                                                          active_rows_where,
                                                          require_text)
from wms.infrastructure.persistence.models.role import Role
from wms.infrastructure.persistence.models.user import User
from wms.shared.utils import utc_now


class Permission(CuidMixin, BaseEntityMixin, Base):
    """
    System-wide permission (e.g., 'warehouse:create').

    Permissions are global; tenants differ only in which roles carry them.
    Authorization identity is the (resource, action) pair.
    """

    __tablename__ = "permission"

    name: Mapped[str] = mapped_column(String(150), nullable=False)
    resource: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    action: Mapped[str] = mapped_column(String(100), nullable=False)
    module: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        Index(
            "uq_permission_resource_action_active",
            "resource",
            "action",
            unique=True,
            **active_rows_where(),
        ),
    )

    @validates("name", "resource", "action")
    def _validate_required(self, key: str, value: str) -> str:
        return require_text(value, key)

    @property
    def code(self) -> str:
        return f"{self.resource}:{self.action}"


class RolePermission(Base):
    """Role ↔ Permission link"""

    __tablename__ = "role_permission"

    role_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("role.id", ondelete="CASCADE"), primary_key=True
    )
    permission_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("permission.id", ondelete="CASCADE"), primary_key=True
    )
    assigned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )
    assigned_by: Mapped[str | None] = mapped_column(String(255), nullable=True)

    role: Mapped[Role] = relationship("Role", back_populates="role_permissions")
    permission: Mapped[Permission] = relationship("Permission", lazy="selectin")


class UserRole(Base):
    """User ↔ Role link"""

    __tablename__ = "user_role"

    user_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("user.id", ondelete="CASCADE"), primary_key=True
    )
    role_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("role.id", ondelete="CASCADE"), primary_key=True, index=True
    )
    assigned_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )
    assigned_by: Mapped[str | None] = mapped_column(String(255), nullable=True)

    user: Mapped[User] = relationship("User", back_populates="user_roles")
    role: Mapped[Role] = relationship("Role", lazy="selectin")
