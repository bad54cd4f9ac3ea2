from __future__ import annotations

from wms.infrastructure.persistence.models.company import Company
from wms.infrastructure.persistence.repositories.auditable_repo import AuditableRepository
from wms.infrastructure.persistence.repositories.base import TenantScopedRepository


class CompanyRepository(TenantScopedRepository[Company], AuditableRepository[Company]):
    """Repository for the per-tenant Company record"""

    model = Company
    audit_fields = ("legal_name", "trade_name", "cnpj", "email", "city", "state")

    async def get_by_tenant(self, tenant_id: str) -> Company | None:
        """The tenant's single non-deleted company, if any"""
        result = await self.db.execute(
            self._select_active().where(Company.tenant_id == tenant_id)
        )
        return result.scalar_one_or_none()

    async def cnpj_exists(self, cnpj: str, exclude_id: str | None = None) -> bool:
        """CNPJ is unique across every tenant among non-deleted rows"""
        return await self.exists_where(Company.cnpj == cnpj, exclude_id=exclude_id)
