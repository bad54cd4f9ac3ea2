from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from wms.application.services.tenant_service import TenantService
from wms.presentation.api.dependencies import (get_tenant_context,
                                               get_tenant_service,
                                               get_tenant_service_transactional,
                                               require_permission)
from wms.presentation.api.errors import error_response, failure_response
from wms.presentation.api.v1.schemas.tenant import (TenantCreate,
                                                    TenantResponse,
                                                    TenantUpdate)
from wms.shared.context import RequestContext

router = APIRouter()


@router.get("/current", response_model=TenantResponse)
async def get_current_tenant(
    tenant_id: Annotated[str, Depends(get_tenant_context)],
    service: Annotated[TenantService, Depends(get_tenant_service)],
):
    """Tenant of the authenticated user, from the token claims"""
    result = await service.get(tenant_id)
    if result.is_failure:
        return failure_response(result)
    return TenantResponse.model_validate(result.value)


@router.get(
    "/",
    response_model=list[TenantResponse],
    dependencies=[Depends(require_permission("tenant", "read"))],
)
async def list_tenants(
    service: Annotated[TenantService, Depends(get_tenant_service)],
    skip: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=1000)] = 100,
):
    result = await service.list(skip, limit)
    return [TenantResponse.model_validate(t) for t in result.value or []]


@router.post(
    "/",
    response_model=TenantResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_permission("tenant", "create"))],
)
async def create_tenant(
    data: TenantCreate,
    service: Annotated[TenantService, Depends(get_tenant_service_transactional)],
):
    """
    Create a new tenant.

    Slug and domain must be unique; the subscription window must end after
    it starts.
    """
    result = await service.create(data)
    if result.is_failure:
        return failure_response(result)
    return TenantResponse.model_validate(result.value)


@router.put("/{tenant_id}", response_model=TenantResponse)
async def update_tenant(
    tenant_id: str,
    data: TenantUpdate,
    context: Annotated[RequestContext, Depends(require_permission("tenant", "update"))],
    service: Annotated[TenantService, Depends(get_tenant_service_transactional)],
):
    # Tenant users may only edit their own tenant
    if context.tenant_id is not None and context.tenant_id != tenant_id:
        return error_response(status.HTTP_403_FORBIDDEN, "Cannot modify another tenant")

    result = await service.update(tenant_id, data)
    if result.is_failure:
        return failure_response(result)
    return TenantResponse.model_validate(result.value)
