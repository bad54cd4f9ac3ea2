from __future__ import annotations

from sqlalchemy import or_

from wms.infrastructure.persistence.models.user import User
from wms.infrastructure.persistence.repositories.auditable_repo import AuditableRepository
from wms.infrastructure.persistence.repositories.base import TenantScopedRepository


class UserRepository(TenantScopedRepository[User], AuditableRepository[User]):
    """Repository for User operations with automatic audit tracking."""

    model = User
    audit_fields = ("username", "email", "is_active")

    async def get_by_username(self, username: str) -> User | None:
        """Exact (case-sensitive) username match among non-deleted users"""
        result = await self.db.execute(self._select_active().where(User.username == username))
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> User | None:
        result = await self.db.execute(self._select_active().where(User.email == email))
        return result.scalar_one_or_none()

    async def get_by_username_or_email(self, identifier: str) -> User | None:
        """Login lookup. A username match wins over an email match."""
        result = await self.db.execute(
            self._select_active().where(
                or_(User.username == identifier, User.email == identifier)
            )
        )
        users = list(result.scalars().all())
        for user in users:
            if user.username == identifier:
                return user
        return users[0] if users else None

    async def get_by_refresh_token(self, refresh_token: str) -> User | None:
        result = await self.db.execute(
            self._select_active().where(User.refresh_token == refresh_token)
        )
        return result.scalar_one_or_none()

    async def username_exists(self, username: str, exclude_id: str | None = None) -> bool:
        return await self.exists_where(User.username == username, exclude_id=exclude_id)

    async def email_exists(self, email: str, exclude_id: str | None = None) -> bool:
        return await self.exists_where(User.email == email, exclude_id=exclude_id)

    async def count_in_tenant(self, tenant_id: str) -> int:
        return await self.count(User.tenant_id == tenant_id)

    async def list_all(self, tenant_id: str | None, skip: int = 0, limit: int = 100) -> list[User]:
        """Users of a tenant, or every user when tenant_id is None (global admins)"""
        if tenant_id is None:
            return await self.get_all(skip, limit)
        return await self.list_for_tenant(tenant_id, skip, limit)

    async def list_deleted(
        self, tenant_id: str | None, skip: int = 0, limit: int = 100
    ) -> list[User]:
        if tenant_id is None:
            return await self.get_deleted(skip, limit)
        return await self.list_deleted_for_tenant(tenant_id, skip, limit)

    async def save_login_state(self, user: User) -> User:
        """
        Flush login bookkeeping (failed attempts, lockout, refresh token).

        Bypasses the UPDATE audit hook: login attempts get their own
        LOGIN audit rows.
        """
        await self.db.flush()
        return user
