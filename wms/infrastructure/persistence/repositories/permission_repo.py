from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from wms.infrastructure.persistence.models.permission import Permission
from wms.infrastructure.persistence.repositories.base import BaseRepository


class PermissionRepository(BaseRepository[Permission]):
    """Repository for the global permission catalogue"""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Permission)

    async def list_all(self, module: str | None = None) -> list[Permission]:
        stmt = self._select_active()
        if module:
            stmt = stmt.where(Permission.module == module)
        result = await self.db.execute(
            stmt.order_by(Permission.module, Permission.resource, Permission.action)
        )
        return list(result.scalars().all())

    async def get_many(self, permission_ids: list[str]) -> list[Permission]:
        if not permission_ids:
            return []
        result = await self.db.execute(
            self._select_active().where(Permission.id.in_(permission_ids))
        )
        return list(result.scalars().all())

    async def get_by_resource_action(self, resource: str, action: str) -> Permission | None:
        result = await self.db.execute(
            self._select_active().where(
                Permission.resource == resource, Permission.action == action
            )
        )
        return result.scalar_one_or_none()

    async def list_modules(self) -> list[str]:
        result = await self.db.execute(
            select(Permission.module)
            .where(Permission.is_deleted.is_(False), Permission.module.is_not(None))
            .distinct()
            .order_by(Permission.module)
        )
        return [row[0] for row in result.all()]
