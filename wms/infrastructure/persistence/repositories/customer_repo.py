from __future__ import annotations

from wms.infrastructure.persistence.models.customer import Customer
from wms.infrastructure.persistence.repositories.auditable_repo import AuditableRepository
from wms.infrastructure.persistence.repositories.base import TenantScopedRepository


class CustomerRepository(TenantScopedRepository[Customer], AuditableRepository[Customer]):
    """Repository for Customer operations with automatic audit tracking."""

    model = Customer
    audit_fields = ("name", "customer_type", "document_number", "status")

    async def document_exists(
        self, tenant_id: str, document_number: str, exclude_id: str | None = None
    ) -> bool:
        return await self.exists_where(
            Customer.tenant_id == tenant_id,
            Customer.document_number == document_number,
            exclude_id=exclude_id,
        )
