from datetime import timedelta

import pytest

from wms.application.result import ErrorType
from wms.application.services.tenant_service import TenantService
from wms.domain.exceptions import ValidationException
from wms.infrastructure.persistence.repositories import TenantRepository
from wms.presentation.api.v1.schemas.tenant import TenantCreate, TenantUpdate
from wms.shared.utils import utc_now


@pytest.fixture
def tenant_service(test_db) -> TenantService:
    return TenantService(TenantRepository(test_db))


@pytest.mark.asyncio
async def test_create_defaults_subscription_start(tenant_service, seeded, actor):
    actor()

    result = await tenant_service.create(TenantCreate(name="Beta", slug="beta", max_users=5))

    assert result.success
    assert result.value.is_active
    assert result.value.subscription_start_date is not None
    assert result.value.max_users == 5


@pytest.mark.asyncio
async def test_duplicate_slug(tenant_service, seeded, actor):
    actor()

    result = await tenant_service.create(TenantCreate(name="Again", slug="wms-default"))

    assert result.error == "Tenant with slug 'wms-default' already exists"
    assert result.error_type == ErrorType.DOMAIN


@pytest.mark.asyncio
async def test_end_before_start_is_rejected(tenant_service, seeded, actor):
    actor()
    start = utc_now()

    with pytest.raises(ValidationException):
        await tenant_service.create(
            TenantCreate(
                name="Gamma",
                slug="gamma",
                subscription_start_date=start,
                subscription_end_date=start - timedelta(days=1),
            )
        )


@pytest.mark.asyncio
async def test_update_and_deactivate(tenant_service, seeded, actor):
    actor()

    result = await tenant_service.update(
        seeded.tenant.id, TenantUpdate(name="Renamed", is_active=False)
    )

    assert result.value.name == "Renamed"
    assert not result.value.is_active
    assert not result.value.is_subscription_active()
