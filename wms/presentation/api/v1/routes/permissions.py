from typing import Annotated

from fastapi import APIRouter, Depends, Query

from wms.application.services.permission_service import PermissionService
from wms.presentation.api.dependencies import (get_permission_service,
                                               require_permission)
from wms.presentation.api.v1.schemas.role import PermissionResponse

router = APIRouter(dependencies=[Depends(require_permission("permission", "read"))])


@router.get("/", response_model=list[PermissionResponse])
async def list_permissions(
    service: Annotated[PermissionService, Depends(get_permission_service)],
    module: Annotated[str | None, Query(max_length=100, description="Filter by module")] = None,
):
    """Permission catalogue, optionally narrowed to one module"""
    result = await service.list(module)
    return [PermissionResponse.model_validate(p) for p in result.value or []]


@router.get("/modules", response_model=list[str])
async def list_modules(
    service: Annotated[PermissionService, Depends(get_permission_service)],
):
    result = await service.list_modules()
    return result.value or []
