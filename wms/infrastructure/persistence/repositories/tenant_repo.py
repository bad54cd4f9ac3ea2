from __future__ import annotations

from wms.infrastructure.persistence.models.tenant import Tenant
from wms.infrastructure.persistence.repositories.auditable_repo import AuditableRepository


class TenantRepository(AuditableRepository[Tenant]):
    """Repository for Tenant operations with automatic audit tracking."""

    model = Tenant
    audit_fields = ("name", "slug", "domain", "is_active", "max_users")

    def _get_tenant_id(self, obj: Tenant) -> str | None:
        # A tenant is its own scope
        return obj.id

    async def get_by_slug(self, slug: str) -> Tenant | None:
        result = await self.db.execute(self._select_active().where(Tenant.slug == slug))
        return result.scalar_one_or_none()

    async def slug_exists(self, slug: str, exclude_id: str | None = None) -> bool:
        return await self.exists_where(Tenant.slug == slug, exclude_id=exclude_id)

    async def domain_exists(self, domain: str, exclude_id: str | None = None) -> bool:
        return await self.exists_where(Tenant.domain == domain, exclude_id=exclude_id)
