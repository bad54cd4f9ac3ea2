from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from wms.application.services.customer_service import CustomerService
from wms.presentation.api.dependencies import (
    get_customer_service, get_customer_service_transactional,
    get_tenant_context, require_permission)
from wms.presentation.api.errors import failure_response
from wms.presentation.api.v1.schemas.customer import (CustomerCreate,
                                                      CustomerResponse,
                                                      CustomerUpdate)

router = APIRouter()


@router.get(
    "/",
    response_model=list[CustomerResponse],
    dependencies=[Depends(require_permission("customer", "read"))],
)
async def list_customers(
    tenant_id: Annotated[str, Depends(get_tenant_context)],
    service: Annotated[CustomerService, Depends(get_customer_service)],
    skip: Annotated[int, Query(ge=0, description="Number of records to skip")] = 0,
    limit: Annotated[int, Query(ge=1, le=1000, description="Max records to return")] = 100,
):
    """Active customers of the current tenant"""
    result = await service.list(tenant_id, skip, limit)
    return [CustomerResponse.model_validate(c) for c in result.value or []]


@router.get(
    "/deleted",
    response_model=list[CustomerResponse],
    dependencies=[Depends(require_permission("customer", "read"))],
)
async def list_deleted_customers(
    tenant_id: Annotated[str, Depends(get_tenant_context)],
    service: Annotated[CustomerService, Depends(get_customer_service)],
    skip: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=1000)] = 100,
):
    """Soft-deleted customers, for the restore screen"""
    result = await service.list_deleted(tenant_id, skip, limit)
    return [CustomerResponse.model_validate(c) for c in result.value or []]


@router.get(
    "/{customer_id}",
    response_model=CustomerResponse,
    dependencies=[Depends(require_permission("customer", "read"))],
)
async def get_customer(
    customer_id: str,
    tenant_id: Annotated[str, Depends(get_tenant_context)],
    service: Annotated[CustomerService, Depends(get_customer_service)],
):
    result = await service.get(tenant_id, customer_id)
    if result.is_failure:
        return failure_response(result)
    return CustomerResponse.model_validate(result.value)


@router.post(
    "/",
    response_model=CustomerResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_permission("customer", "create"))],
)
async def create_customer(
    data: CustomerCreate,
    tenant_id: Annotated[str, Depends(get_tenant_context)],
    service: Annotated[CustomerService, Depends(get_customer_service_transactional)],
):
    """Document numbers (CNPJ/CPF) are unique per tenant when present"""
    result = await service.create(tenant_id, data)
    if result.is_failure:
        return failure_response(result)
    return CustomerResponse.model_validate(result.value)


@router.put(
    "/{customer_id}",
    response_model=CustomerResponse,
    dependencies=[Depends(require_permission("customer", "update"))],
)
async def update_customer(
    customer_id: str,
    data: CustomerUpdate,
    tenant_id: Annotated[str, Depends(get_tenant_context)],
    service: Annotated[CustomerService, Depends(get_customer_service_transactional)],
):
    result = await service.update(tenant_id, customer_id, data)
    if result.is_failure:
        return failure_response(result)
    return CustomerResponse.model_validate(result.value)


@router.delete(
    "/{customer_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_permission("customer", "delete"))],
)
async def delete_customer(
    customer_id: str,
    tenant_id: Annotated[str, Depends(get_tenant_context)],
    service: Annotated[CustomerService, Depends(get_customer_service_transactional)],
):
    result = await service.delete(tenant_id, customer_id)
    if result.is_failure:
        return failure_response(result)


@router.patch(
    "/{customer_id}/restore",
    response_model=CustomerResponse,
    dependencies=[Depends(require_permission("customer", "delete"))],
)
async def restore_customer(
    customer_id: str,
    tenant_id: Annotated[str, Depends(get_tenant_context)],
    service: Annotated[CustomerService, Depends(get_customer_service_transactional)],
):
    result = await service.restore(tenant_id, customer_id)
    if result.is_failure:
        return failure_response(result)
    return CustomerResponse.model_validate(result.value)
