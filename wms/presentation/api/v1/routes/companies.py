"""
Company registration of the current tenant.

A tenant has at most one active company, so these routes address it
without an id.
"""
from typing import Annotated

from fastapi import APIRouter, Depends, status

from wms.application.services.company_service import CompanyService
from wms.presentation.api.dependencies import (
    get_company_service, get_company_service_transactional,
    get_tenant_context, require_permission)
from wms.presentation.api.errors import failure_response
from wms.presentation.api.v1.schemas.company import (CompanyCreate,
                                                     CompanyResponse,
                                                     CompanyUpdate)

router = APIRouter()


@router.get(
    "/",
    response_model=CompanyResponse,
    dependencies=[Depends(require_permission("company", "read"))],
)
async def get_company(
    tenant_id: Annotated[str, Depends(get_tenant_context)],
    service: Annotated[CompanyService, Depends(get_company_service)],
):
    result = await service.get(tenant_id)
    if result.is_failure:
        return failure_response(result)
    return CompanyResponse.model_validate(result.value)


@router.post(
    "/",
    response_model=CompanyResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_permission("company", "create"))],
)
async def create_company(
    data: CompanyCreate,
    tenant_id: Annotated[str, Depends(get_tenant_context)],
    service: Annotated[CompanyService, Depends(get_company_service_transactional)],
):
    """Register the tenant's company; the CNPJ must not belong to an active company"""
    result = await service.create(tenant_id, data)
    if result.is_failure:
        return failure_response(result)
    return CompanyResponse.model_validate(result.value)


@router.put(
    "/",
    response_model=CompanyResponse,
    dependencies=[Depends(require_permission("company", "update"))],
)
async def update_company(
    data: CompanyUpdate,
    tenant_id: Annotated[str, Depends(get_tenant_context)],
    service: Annotated[CompanyService, Depends(get_company_service_transactional)],
):
    result = await service.update(tenant_id, data)
    if result.is_failure:
        return failure_response(result)
    return CompanyResponse.model_validate(result.value)


@router.delete(
    "/",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_permission("company", "delete"))],
)
async def delete_company(
    tenant_id: Annotated[str, Depends(get_tenant_context)],
    service: Annotated[CompanyService, Depends(get_company_service_transactional)],
):
    result = await service.delete(tenant_id)
    if result.is_failure:
        return failure_response(result)
