from __future__ import annotations

from wms.application.result import Result
from wms.infrastructure.persistence.models.permission import Permission
from wms.infrastructure.persistence.repositories.permission_repo import \
    PermissionRepository


class PermissionService:
    """Read access to the global permission catalogue"""

    def __init__(self, permission_repo: PermissionRepository) -> None:
        self.permission_repo = permission_repo

    async def list(self, module: str | None = None) -> Result[list[Permission]]:
        return Result.ok(await self.permission_repo.list_all(module))

    async def list_modules(self) -> Result[list[str]]:
        return Result.ok(await self.permission_repo.list_modules())
