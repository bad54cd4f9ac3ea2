from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from wms.application.services.authorization_service import AuthorizationService
from wms.application.services.user_service import UserService
from wms.presentation.api.dependencies import (get_authz_service,
                                               get_current_context,
                                               get_user_service,
                                               get_user_service_transactional,
                                               require_permission)
from wms.presentation.api.errors import failure_response
from wms.presentation.api.v1.schemas.user import (AssignRolesRequest,
                                                  DeletedUserResponse,
                                                  UserCreate, UserResponse,
                                                  UserUpdate)
from wms.shared.context import RequestContext

router = APIRouter()


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    context: Annotated[RequestContext, Depends(get_current_context)],
    service: Annotated[UserService, Depends(get_user_service)],
    authz_service: Annotated[AuthorizationService, Depends(get_authz_service)],
):
    """Get current authenticated user information"""
    assert context.user_id is not None
    result = await service.get(context.user_id, None)
    if result.is_failure:
        return failure_response(result)
    permissions = sorted(await authz_service.get_user_permissions(context.user_id))
    return UserResponse.from_orm_model(result.value, permissions=permissions)


@router.get("/", response_model=list[UserResponse])
async def list_users(
    context: Annotated[RequestContext, Depends(require_permission("user", "read"))],
    service: Annotated[UserService, Depends(get_user_service)],
    skip: Annotated[int, Query(ge=0, description="Number of records to skip")] = 0,
    limit: Annotated[int, Query(ge=1, le=1000, description="Max records to return")] = 100,
):
    """Users of the caller's tenant (every user for a global administrator)"""
    result = await service.list(context.tenant_id, skip, limit)
    return [UserResponse.from_orm_model(user) for user in result.value or []]


@router.get("/deleted", response_model=list[DeletedUserResponse])
async def list_deleted_users(
    context: Annotated[RequestContext, Depends(require_permission("user", "read"))],
    service: Annotated[UserService, Depends(get_user_service)],
    skip: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=1000)] = 100,
):
    result = await service.list_deleted(context.tenant_id, skip, limit)
    return [DeletedUserResponse.from_orm_model(user) for user in result.value or []]


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    context: Annotated[RequestContext, Depends(require_permission("user", "read"))],
    service: Annotated[UserService, Depends(get_user_service)],
):
    result = await service.get(user_id, context.tenant_id)
    if result.is_failure:
        return failure_response(result)
    return UserResponse.from_orm_model(result.value)


@router.post("/", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    data: UserCreate,
    context: Annotated[RequestContext, Depends(require_permission("user", "create"))],
    service: Annotated[UserService, Depends(get_user_service_transactional)],
):
    """Create a user in the caller's tenant, optionally with initial roles"""
    result = await service.create(context.tenant_id, data)
    if result.is_failure:
        return failure_response(result)
    return UserResponse.from_orm_model(result.value)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    data: UserUpdate,
    context: Annotated[RequestContext, Depends(require_permission("user", "update"))],
    service: Annotated[UserService, Depends(get_user_service_transactional)],
):
    result = await service.update(user_id, context.tenant_id, data)
    if result.is_failure:
        return failure_response(result)
    return UserResponse.from_orm_model(result.value)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: str,
    context: Annotated[RequestContext, Depends(require_permission("user", "delete"))],
    service: Annotated[UserService, Depends(get_user_service_transactional)],
):
    """Soft delete; also revokes the user's refresh token"""
    result = await service.delete(user_id, context.tenant_id)
    if result.is_failure:
        return failure_response(result)


@router.patch("/{user_id}/restore", response_model=UserResponse)
async def restore_user(
    user_id: str,
    context: Annotated[RequestContext, Depends(require_permission("user", "delete"))],
    service: Annotated[UserService, Depends(get_user_service_transactional)],
):
    result = await service.restore(user_id, context.tenant_id)
    if result.is_failure:
        return failure_response(result)
    return UserResponse.from_orm_model(result.value)


@router.get("/{user_id}/roles", response_model=list[str])
async def get_user_roles(
    user_id: str,
    context: Annotated[RequestContext, Depends(require_permission("user", "read"))],
    service: Annotated[UserService, Depends(get_user_service)],
):
    result = await service.get_roles(user_id, context.tenant_id)
    if result.is_failure:
        return failure_response(result)
    return result.value


@router.post("/{user_id}/roles", response_model=UserResponse)
async def assign_roles(
    user_id: str,
    data: AssignRolesRequest,
    context: Annotated[RequestContext, Depends(require_permission("role", "assign"))],
    service: Annotated[UserService, Depends(get_user_service_transactional)],
):
    """Replace the user's roles (requires 'role:assign' permission)"""
    result = await service.assign_roles(user_id, context.tenant_id, data.role_ids)
    if result.is_failure:
        return failure_response(result)
    return UserResponse.from_orm_model(result.value)
