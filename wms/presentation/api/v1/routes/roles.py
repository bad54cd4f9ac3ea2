from typing import Annotated

from fastapi import APIRouter, Depends, status

from wms.application.services.role_service import RoleService, RoleWithUsage
from wms.presentation.api.dependencies import (get_role_service,
                                               get_role_service_transactional,
                                               require_permission)
from wms.presentation.api.errors import failure_response
from wms.presentation.api.v1.schemas.role import (AssignPermissionsRequest,
                                                  RoleCreate, RoleResponse,
                                                  RoleUpdate)
from wms.shared.context import RequestContext

router = APIRouter()


def _to_response(item: RoleWithUsage) -> RoleResponse:
    return RoleResponse.from_orm_model(item.role, item.user_count)


@router.get("/", response_model=list[RoleResponse])
async def list_roles(
    context: Annotated[RequestContext, Depends(require_permission("role", "read"))],
    service: Annotated[RoleService, Depends(get_role_service)],
):
    """Global roles plus the caller's tenant roles, with user counts and permissions"""
    result = await service.list(context.tenant_id)
    return [_to_response(item) for item in result.value or []]


@router.get("/{role_id}", response_model=RoleResponse)
async def get_role(
    role_id: str,
    context: Annotated[RequestContext, Depends(require_permission("role", "read"))],
    service: Annotated[RoleService, Depends(get_role_service)],
):
    result = await service.get(role_id, context.tenant_id)
    if result.is_failure:
        return failure_response(result)
    assert result.value is not None
    return _to_response(result.value)


@router.post("/", response_model=RoleResponse, status_code=status.HTTP_201_CREATED)
async def create_role(
    data: RoleCreate,
    context: Annotated[RequestContext, Depends(require_permission("role", "create"))],
    service: Annotated[RoleService, Depends(get_role_service_transactional)],
):
    """Create a custom role in the caller's tenant (global when the caller has none)"""
    result = await service.create(context.tenant_id, data)
    if result.is_failure:
        return failure_response(result)
    assert result.value is not None
    return _to_response(result.value)


@router.put("/{role_id}", response_model=RoleResponse)
async def update_role(
    role_id: str,
    data: RoleUpdate,
    context: Annotated[RequestContext, Depends(require_permission("role", "update"))],
    service: Annotated[RoleService, Depends(get_role_service_transactional)],
):
    """System roles cannot be renamed or edited"""
    result = await service.update(role_id, context.tenant_id, data)
    if result.is_failure:
        return failure_response(result)
    assert result.value is not None
    return _to_response(result.value)


@router.delete("/{role_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_role(
    role_id: str,
    context: Annotated[RequestContext, Depends(require_permission("role", "delete"))],
    service: Annotated[RoleService, Depends(get_role_service_transactional)],
):
    """Refused for system roles and for roles still assigned to users"""
    result = await service.delete(role_id, context.tenant_id)
    if result.is_failure:
        return failure_response(result)


@router.post("/{role_id}/permissions", response_model=RoleResponse)
async def assign_permissions(
    role_id: str,
    data: AssignPermissionsRequest,
    context: Annotated[RequestContext, Depends(require_permission("role", "update"))],
    service: Annotated[RoleService, Depends(get_role_service_transactional)],
):
    """Replace the role's permission set"""
    result = await service.assign_permissions(role_id, context.tenant_id, data.permission_ids)
    if result.is_failure:
        return failure_response(result)
    assert result.value is not None
    return _to_response(result.value)
