import pytest

from wms.application.services.permission_service import PermissionService
from wms.infrastructure.persistence.repositories import PermissionRepository


@pytest.fixture
def permission_service(test_db) -> PermissionService:
    return PermissionService(PermissionRepository(test_db))


@pytest.mark.asyncio
async def test_list_filters_by_module(permission_service, seeded):
    everything = await permission_service.list()
    master_data = await permission_service.list("MasterData")

    assert everything.success
    assert master_data.value
    assert all(p.module == "MasterData" for p in master_data.value)
    assert len(master_data.value) < len(everything.value)


@pytest.mark.asyncio
async def test_modules_are_distinct_and_sorted(permission_service, seeded):
    result = await permission_service.list_modules()

    assert result.value == sorted(set(result.value))
    assert {"Administration", "MasterData"} <= set(result.value)
