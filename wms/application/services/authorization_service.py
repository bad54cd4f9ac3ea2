from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from wms.domain.exceptions import PermissionDeniedError
from wms.infrastructure.cache.redis_cache import CacheService
from wms.infrastructure.config.settings import get_settings
from wms.infrastructure.persistence.models.permission import (Permission,
                                                              RolePermission,
                                                              UserRole)
from wms.infrastructure.persistence.models.role import Role


class AuthorizationService:
    """
    Resolves a user's roles and permissions, with Redis caching.
    Follow principle: "Check permissions, not roles"

    Permission codes have the form ``resource:action``. ``resource:*``
    grants every action on a resource and ``*:*`` grants everything.
    """

    def __init__(self, db: AsyncSession, cache_service: CacheService | None = None):
        self.db = db
        self.cache = cache_service
        self.settings = get_settings()
        self.cache_ttl = self.settings.cache_ttl_permissions

    @staticmethod
    def _cache_key(kind: str, user_id: str) -> str:
        return f"authz:{user_id}:{kind}"

    async def get_user_roles(self, user_id: str) -> list[str]:
        """Distinct names of the user's non-deleted roles, sorted"""
        cache_key = self._cache_key("roles", user_id)
        if self.cache and self.cache.is_available():
            cached = await self.cache.get(cache_key)
            if cached is not None:
                return list(cached)

        query = (
            select(Role.name)
            .select_from(UserRole)
            .join(Role, Role.id == UserRole.role_id)
            .where(UserRole.user_id == user_id, Role.is_deleted.is_(False))
            .distinct()
        )
        result = await self.db.execute(query)
        roles = sorted({row[0] for row in result.fetchall()})

        if self.cache and self.cache.is_available():
            await self.cache.set(cache_key, roles, ttl=self.cache_ttl)
        return roles

    async def get_user_permissions(self, user_id: str) -> set[str]:
        """
        All permission codes granted through the user's roles.
        Returns: Set of codes like {'warehouse:create', 'product:read'}
        """
        cache_key = self._cache_key("permissions", user_id)
        if self.cache and self.cache.is_available():
            cached = await self.cache.get(cache_key)
            if cached is not None:
                return set(cached)  # Convert list back to set

        query = (
            select(Permission.resource, Permission.action)
            .select_from(UserRole)
            .join(Role, Role.id == UserRole.role_id)
            .join(RolePermission, RolePermission.role_id == UserRole.role_id)
            .join(Permission, Permission.id == RolePermission.permission_id)
            .where(
                UserRole.user_id == user_id,
                Role.is_deleted.is_(False),
                Permission.is_deleted.is_(False),
            )
        )
        result = await self.db.execute(query)
        permissions = {f"{resource}:{action}" for resource, action in result.fetchall()}

        # Sorted list keeps the cached JSON stable
        if self.cache and self.cache.is_available():
            await self.cache.set(cache_key, sorted(permissions), ttl=self.cache_ttl)
        return permissions

    @staticmethod
    def grants(permissions: set[str] | list[str], resource: str, action: str) -> bool:
        """True if the permission set covers resource:action, wildcards included"""
        granted = set(permissions)
        return (
            f"{resource}:{action}" in granted
            or f"{resource}:*" in granted
            or "*:*" in granted
        )

    async def check_permission(self, user_id: str, resource: str, action: str) -> bool:
        """
        Check if user has specific permission.

        Examples:
            - check_permission(user_id, "warehouse", "create")
            - check_permission(user_id, "user", "delete")
        """
        permissions = await self.get_user_permissions(user_id)
        return self.grants(permissions, resource, action)

    async def require_permission(self, user_id: str, resource: str, action: str) -> None:
        """Raise exception if user lacks permission"""
        if not await self.check_permission(user_id, resource, action):
            raise PermissionDeniedError(
                f"Missing permission {resource}:{action}", resource=resource, action=action
            )

    def _user_keys(self, user_id: str) -> list[str]:
        return [self._cache_key(kind, user_id) for kind in ("roles", "permissions")]

    async def invalidate_user_cache(self, user_id: str) -> None:
        """
        Drop cached roles and permissions for a user

        Call this when:
        - User roles are assigned/revoked
        - User is deactivated or deleted
        """
        await self.invalidate_users_cache([user_id])

    async def invalidate_users_cache(self, user_ids: list[str]) -> None:
        """Invalidate every holder of a role whose permissions changed"""
        if not user_ids or not (self.cache and self.cache.is_available()):
            return
        await self.cache.delete(*[key for user_id in user_ids for key in self._user_keys(user_id)])
