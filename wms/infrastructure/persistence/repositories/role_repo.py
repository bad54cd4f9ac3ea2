from __future__ import annotations

from typing import Any

from sqlalchemy import func, or_, select

from wms.infrastructure.persistence.models.permission import UserRole
from wms.infrastructure.persistence.models.role import Role
from wms.infrastructure.persistence.repositories.auditable_repo import AuditableRepository


class RoleRepository(AuditableRepository[Role]):
    """Repository for Role operations with automatic audit tracking."""

    model = Role
    audit_fields = ("name", "description", "is_system_role")

    def _serialize_for_audit(self, obj: Role) -> dict[str, Any]:
        return super()._serialize_for_audit(obj) | {"permissions": obj.permission_codes}

    def _visible_to(self, tenant_id: str | None):
        """Global roles plus the tenant's own roles"""
        if tenant_id is None:
            return Role.tenant_id.is_(None)
        return or_(Role.tenant_id.is_(None), Role.tenant_id == tenant_id)

    async def list_visible(self, tenant_id: str | None) -> list[Role]:
        result = await self.db.execute(
            self._select_active().where(self._visible_to(tenant_id)).order_by(Role.name)
        )
        return list(result.scalars().all())

    async def get_visible(self, role_id: str, tenant_id: str | None) -> Role | None:
        result = await self.db.execute(
            self._select_active().where(Role.id == role_id, self._visible_to(tenant_id))
        )
        return result.scalar_one_or_none()

    async def get_many_visible(self, role_ids: list[str], tenant_id: str | None) -> list[Role]:
        if not role_ids:
            return []
        result = await self.db.execute(
            self._select_active().where(Role.id.in_(role_ids), self._visible_to(tenant_id))
        )
        return list(result.scalars().all())

    async def get_by_name(self, name: str, tenant_id: str | None) -> Role | None:
        """Exact name match within one scope (tenant or global)"""
        scope = Role.tenant_id.is_(None) if tenant_id is None else Role.tenant_id == tenant_id
        result = await self.db.execute(self._select_active().where(Role.name == name, scope))
        return result.scalar_one_or_none()

    async def name_exists(
        self, name: str, tenant_id: str | None, exclude_id: str | None = None
    ) -> bool:
        scope = Role.tenant_id.is_(None) if tenant_id is None else Role.tenant_id == tenant_id
        return await self.exists_where(Role.name == name, scope, exclude_id=exclude_id)

    async def count_users(self, role_id: str) -> int:
        """Number of UserRole links referencing the role"""
        result = await self.db.execute(
            select(func.count()).select_from(UserRole).where(UserRole.role_id == role_id)
        )
        return int(result.scalar_one())

    async def count_users_by_role(self, role_ids: list[str]) -> dict[str, int]:
        if not role_ids:
            return {}
        result = await self.db.execute(
            select(UserRole.role_id, func.count())
            .where(UserRole.role_id.in_(role_ids))
            .group_by(UserRole.role_id)
        )
        counts = {role_id: 0 for role_id in role_ids}
        counts.update({role_id: int(count) for role_id, count in result.all()})
        return counts

    async def get_user_ids(self, role_id: str) -> list[str]:
        result = await self.db.execute(select(UserRole.user_id).where(UserRole.role_id == role_id))
        return [row[0] for row in result.all()]
