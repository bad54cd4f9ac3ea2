"""
Tenant administration: onboarding new tenants and maintaining their
contact and subscription data.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from wms.application.result import ErrorType, Result
from wms.infrastructure.persistence.models.tenant import Tenant
from wms.infrastructure.persistence.repositories.tenant_repo import TenantRepository
from wms.shared.context import get_current_actor
from wms.shared.telemetry.logging import get_logger
from wms.shared.utils import utc_now

if TYPE_CHECKING:
    from wms.presentation.api.v1.schemas.tenant import TenantCreate, TenantUpdate

logger = get_logger(__name__)


class TenantService:
    def __init__(self, tenant_repo: TenantRepository) -> None:
        self.tenant_repo = tenant_repo

    async def list(self, skip: int = 0, limit: int = 100) -> Result[list[Tenant]]:
        return Result.ok(await self.tenant_repo.get_all(skip, limit))

    async def get(self, tenant_id: str) -> Result[Tenant]:
        tenant = await self.tenant_repo.get_by_id(tenant_id)
        if tenant is None:
            return Result.not_found("Tenant")
        return Result.ok(tenant)

    async def create(self, data: "TenantCreate") -> Result[Tenant]:
        """
        Create a tenant.

        Slug and domain are unique among non-deleted tenants. A missing
        subscription start defaults to now.
        """
        if await self.tenant_repo.slug_exists(data.slug):
            return Result.fail(f"Tenant with slug '{data.slug}' already exists", ErrorType.DOMAIN)
        if data.domain and await self.tenant_repo.domain_exists(data.domain):
            return Result.fail(
                f"Tenant with domain '{data.domain}' already exists", ErrorType.DOMAIN
            )

        start_date = data.subscription_start_date or utc_now()
        Tenant.validate_subscription(start_date, data.subscription_end_date, data.max_users)

        tenant = Tenant(
            name=data.name,
            slug=data.slug,
            domain=data.domain,
            contact_email=data.contact_email,
            contact_phone=data.contact_phone,
            address=data.address,
            is_active=True,
            subscription_start_date=start_date,
            subscription_end_date=data.subscription_end_date,
            max_users=data.max_users,
            created_by=get_current_actor(),
        )

        created = await self.tenant_repo.create(tenant)
        logger.info("Created tenant %s (%s)", created.id, created.slug)
        return Result.ok(created)

    async def update(self, tenant_id: str, data: "TenantUpdate") -> Result[Tenant]:
        tenant = await self.tenant_repo.get_by_id(tenant_id)
        if tenant is None:
            return Result.not_found("Tenant")

        actor = get_current_actor()
        tenant.update(
            actor,
            name=data.name if data.name is not None else tenant.name,
            contact_email=(
                data.contact_email if data.contact_email is not None else tenant.contact_email
            ),
            contact_phone=(
                data.contact_phone if data.contact_phone is not None else tenant.contact_phone
            ),
            address=data.address if data.address is not None else tenant.address,
        )
        if data.is_active is True:
            tenant.activate(actor)
        elif data.is_active is False:
            tenant.deactivate(actor)

        return Result.ok(await self.tenant_repo.update(tenant))
