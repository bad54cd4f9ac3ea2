from __future__ import annotations

from wms.infrastructure.persistence.models.warehouse import Warehouse
from wms.infrastructure.persistence.repositories.auditable_repo import AuditableRepository
from wms.infrastructure.persistence.repositories.base import TenantScopedRepository


class WarehouseRepository(TenantScopedRepository[Warehouse], AuditableRepository[Warehouse]):
    """Repository for Warehouse operations with automatic audit tracking."""

    model = Warehouse
    audit_fields = ("name", "code", "city", "state", "status")

    async def code_exists(
        self, tenant_id: str, code: str, exclude_id: str | None = None
    ) -> bool:
        return await self.exists_where(
            Warehouse.tenant_id == tenant_id, Warehouse.code == code, exclude_id=exclude_id
        )
