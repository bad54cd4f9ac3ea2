from __future__ import annotations

from wms.infrastructure.persistence.models.product import Product
from wms.infrastructure.persistence.repositories.auditable_repo import AuditableRepository
from wms.infrastructure.persistence.repositories.base import TenantScopedRepository


class ProductRepository(TenantScopedRepository[Product], AuditableRepository[Product]):
    """Repository for Product operations with automatic audit tracking."""

    model = Product
    audit_fields = ("sku", "name", "category", "product_type", "is_active")

    async def get_by_sku(self, tenant_id: str, sku: str) -> Product | None:
        result = await self.db.execute(
            self._select_active().where(Product.tenant_id == tenant_id, Product.sku == sku)
        )
        return result.scalar_one_or_none()

    async def sku_exists(self, tenant_id: str, sku: str, exclude_id: str | None = None) -> bool:
        return await self.exists_where(
            Product.tenant_id == tenant_id, Product.sku == sku, exclude_id=exclude_id
        )
