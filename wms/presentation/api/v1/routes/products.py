from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from wms.application.services.product_service import ProductService
from wms.presentation.api.dependencies import (
    get_product_service, get_product_service_transactional,
    get_tenant_context, require_permission)
from wms.presentation.api.errors import failure_response
from wms.presentation.api.v1.schemas.product import (ProductCreate,
                                                     ProductResponse,
                                                     ProductUpdate,
                                                     SkuExistsResponse)

router = APIRouter()


@router.get(
    "/",
    response_model=list[ProductResponse],
    dependencies=[Depends(require_permission("product", "read"))],
)
async def list_products(
    tenant_id: Annotated[str, Depends(get_tenant_context)],
    service: Annotated[ProductService, Depends(get_product_service)],
    skip: Annotated[int, Query(ge=0, description="Number of records to skip")] = 0,
    limit: Annotated[int, Query(ge=1, le=1000, description="Max records to return")] = 100,
):
    """Active products of the current tenant"""
    result = await service.list(tenant_id, skip, limit)
    return [ProductResponse.model_validate(p) for p in result.value or []]


@router.get(
    "/deleted",
    response_model=list[ProductResponse],
    dependencies=[Depends(require_permission("product", "read"))],
)
async def list_deleted_products(
    tenant_id: Annotated[str, Depends(get_tenant_context)],
    service: Annotated[ProductService, Depends(get_product_service)],
    skip: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=1000)] = 100,
):
    """Soft-deleted products"""
    result = await service.list_deleted(tenant_id, skip, limit)
    return [ProductResponse.model_validate(p) for p in result.value or []]


@router.get(
    "/sku/{sku}",
    response_model=ProductResponse,
    dependencies=[Depends(require_permission("product", "read"))],
)
async def get_product_by_sku(
    sku: str,
    tenant_id: Annotated[str, Depends(get_tenant_context)],
    service: Annotated[ProductService, Depends(get_product_service)],
):
    result = await service.get_by_sku(tenant_id, sku)
    if result.is_failure:
        return failure_response(result)
    return ProductResponse.model_validate(result.value)


@router.get(
    "/check-sku/{sku}",
    response_model=SkuExistsResponse,
    dependencies=[Depends(require_permission("product", "read"))],
)
async def check_sku(
    sku: str,
    tenant_id: Annotated[str, Depends(get_tenant_context)],
    service: Annotated[ProductService, Depends(get_product_service)],
):
    """Whether an active product already uses this SKU"""
    result = await service.sku_exists(tenant_id, sku)
    if result.is_failure:
        return failure_response(result)
    return SkuExistsResponse(sku=sku, exists=bool(result.value))


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    dependencies=[Depends(require_permission("product", "read"))],
)
async def get_product(
    product_id: str,
    tenant_id: Annotated[str, Depends(get_tenant_context)],
    service: Annotated[ProductService, Depends(get_product_service)],
):
    result = await service.get(tenant_id, product_id)
    if result.is_failure:
        return failure_response(result)
    return ProductResponse.model_validate(result.value)


@router.post(
    "/",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_permission("product", "create"))],
)
async def create_product(
    data: ProductCreate,
    tenant_id: Annotated[str, Depends(get_tenant_context)],
    service: Annotated[ProductService, Depends(get_product_service_transactional)],
):
    """SKU must be unique among active products of the tenant"""
    result = await service.create(tenant_id, data)
    if result.is_failure:
        return failure_response(result)
    return ProductResponse.model_validate(result.value)


@router.put(
    "/{product_id}",
    response_model=ProductResponse,
    dependencies=[Depends(require_permission("product", "update"))],
)
async def update_product(
    product_id: str,
    data: ProductUpdate,
    tenant_id: Annotated[str, Depends(get_tenant_context)],
    service: Annotated[ProductService, Depends(get_product_service_transactional)],
):
    result = await service.update(tenant_id, product_id, data)
    if result.is_failure:
        return failure_response(result)
    return ProductResponse.model_validate(result.value)


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_permission("product", "delete"))],
)
async def delete_product(
    product_id: str,
    tenant_id: Annotated[str, Depends(get_tenant_context)],
    service: Annotated[ProductService, Depends(get_product_service_transactional)],
):
    """Soft delete; the SKU becomes available again"""
    result = await service.delete(tenant_id, product_id)
    if result.is_failure:
        return failure_response(result)


@router.patch(
    "/{product_id}/restore",
    response_model=ProductResponse,
    dependencies=[Depends(require_permission("product", "delete"))],
)
async def restore_product(
    product_id: str,
    tenant_id: Annotated[str, Depends(get_tenant_context)],
    service: Annotated[ProductService, Depends(get_product_service_transactional)],
):
    result = await service.restore(tenant_id, product_id)
    if result.is_failure:
        return failure_response(result)
    return ProductResponse.model_validate(result.value)
