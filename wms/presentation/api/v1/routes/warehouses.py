from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from wms.application.services.warehouse_service import WarehouseService
from wms.presentation.api.dependencies import (
    get_tenant_context, get_warehouse_service,
    get_warehouse_service_transactional, require_permission)
from wms.presentation.api.errors import failure_response
from wms.presentation.api.v1.schemas.warehouse import (WarehouseCreate,
                                                       WarehouseResponse,
                                                       WarehouseUpdate)

router = APIRouter()


@router.get(
    "/",
    response_model=list[WarehouseResponse],
    dependencies=[Depends(require_permission("warehouse", "read"))],
)
async def list_warehouses(
    tenant_id: Annotated[str, Depends(get_tenant_context)],
    service: Annotated[WarehouseService, Depends(get_warehouse_service)],
    skip: Annotated[int, Query(ge=0, description="Number of records to skip")] = 0,
    limit: Annotated[int, Query(ge=1, le=1000, description="Max records to return")] = 100,
):
    """Active warehouses of the current tenant"""
    result = await service.list(tenant_id, skip, limit)
    return [WarehouseResponse.model_validate(w) for w in result.value or []]


@router.get(
    "/deleted",
    response_model=list[WarehouseResponse],
    dependencies=[Depends(require_permission("warehouse", "read"))],
)
async def list_deleted_warehouses(
    tenant_id: Annotated[str, Depends(get_tenant_context)],
    service: Annotated[WarehouseService, Depends(get_warehouse_service)],
    skip: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=1000)] = 100,
):
    """Soft-deleted warehouses, for the restore screen"""
    result = await service.list_deleted(tenant_id, skip, limit)
    return [WarehouseResponse.model_validate(w) for w in result.value or []]


@router.get(
    "/{warehouse_id}",
    response_model=WarehouseResponse,
    dependencies=[Depends(require_permission("warehouse", "read"))],
)
async def get_warehouse(
    warehouse_id: str,
    tenant_id: Annotated[str, Depends(get_tenant_context)],
    service: Annotated[WarehouseService, Depends(get_warehouse_service)],
):
    result = await service.get(tenant_id, warehouse_id)
    if result.is_failure:
        return failure_response(result)
    return WarehouseResponse.model_validate(result.value)


@router.post(
    "/",
    response_model=WarehouseResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_permission("warehouse", "create"))],
)
async def create_warehouse(
    data: WarehouseCreate,
    tenant_id: Annotated[str, Depends(get_tenant_context)],
    service: Annotated[WarehouseService, Depends(get_warehouse_service_transactional)],
):
    """Create a warehouse; the code must be unique among active warehouses"""
    result = await service.create(tenant_id, data)
    if result.is_failure:
        return failure_response(result)
    return WarehouseResponse.model_validate(result.value)


@router.put(
    "/{warehouse_id}",
    response_model=WarehouseResponse,
    dependencies=[Depends(require_permission("warehouse", "update"))],
)
async def update_warehouse(
    warehouse_id: str,
    data: WarehouseUpdate,
    tenant_id: Annotated[str, Depends(get_tenant_context)],
    service: Annotated[WarehouseService, Depends(get_warehouse_service_transactional)],
):
    result = await service.update(tenant_id, warehouse_id, data)
    if result.is_failure:
        return failure_response(result)
    return WarehouseResponse.model_validate(result.value)


@router.delete(
    "/{warehouse_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_permission("warehouse", "delete"))],
)
async def delete_warehouse(
    warehouse_id: str,
    tenant_id: Annotated[str, Depends(get_tenant_context)],
    service: Annotated[WarehouseService, Depends(get_warehouse_service_transactional)],
):
    """Soft delete; the code becomes available again"""
    result = await service.delete(tenant_id, warehouse_id)
    if result.is_failure:
        return failure_response(result)


@router.patch(
    "/{warehouse_id}/restore",
    response_model=WarehouseResponse,
    dependencies=[Depends(require_permission("warehouse", "delete"))],
)
async def restore_warehouse(
    warehouse_id: str,
    tenant_id: Annotated[str, Depends(get_tenant_context)],
    service: Annotated[WarehouseService, Depends(get_warehouse_service_transactional)],
):
    result = await service.restore(tenant_id, warehouse_id)
    if result.is_failure:
        return failure_response(result)
    return WarehouseResponse.model_validate(result.value)
