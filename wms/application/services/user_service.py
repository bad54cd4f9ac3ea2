from __future__ import annotations

from typing import TYPE_CHECKING

from wms.application.result import ErrorType, Result
from wms.application.services.authorization_service import AuthorizationService
from wms.infrastructure.persistence.models.permission import UserRole
from wms.infrastructure.persistence.models.user import User
from wms.infrastructure.persistence.repositories.role_repo import RoleRepository
from wms.infrastructure.persistence.repositories.tenant_repo import TenantRepository
from wms.infrastructure.persistence.repositories.user_repo import UserRepository
from wms.infrastructure.security.password import get_password_hash
from wms.shared.context import get_current_actor
from wms.shared.enums import AuditAction
from wms.shared.telemetry.logging import get_logger

if TYPE_CHECKING:
    from wms.presentation.api.v1.schemas.user import UserCreate, UserUpdate

logger = get_logger(__name__)


class UserService:
    """
    User administration.

    ``tenant_id`` is the caller's tenant. Tenant administrators only see
    their own users; a caller without a tenant (global administrator)
    sees every user.
    """

    def __init__(
        self,
        user_repo: UserRepository,
        role_repo: RoleRepository,
        tenant_repo: TenantRepository,
        authz_service: AuthorizationService,
    ) -> None:
        self.user_repo = user_repo
        self.role_repo = role_repo
        self.tenant_repo = tenant_repo
        self.authz_service = authz_service

    async def _find(
        self, user_id: str, tenant_id: str | None, *, include_deleted: bool = False
    ) -> User | None:
        if tenant_id is None:
            if include_deleted:
                return await self.user_repo.get_by_id_including_deleted(user_id)
            return await self.user_repo.get_by_id(user_id)
        if include_deleted:
            return await self.user_repo.get_for_tenant_including_deleted(user_id, tenant_id)
        return await self.user_repo.get_for_tenant(user_id, tenant_id)

    async def list(self, tenant_id: str | None, skip: int = 0, limit: int = 100) -> Result[list[User]]:
        return Result.ok(await self.user_repo.list_all(tenant_id, skip, limit))

    async def list_deleted(
        self, tenant_id: str | None, skip: int = 0, limit: int = 100
    ) -> Result[list[User]]:
        return Result.ok(await self.user_repo.list_deleted(tenant_id, skip, limit))

    async def get(self, user_id: str, tenant_id: str | None) -> Result[User]:
        user = await self._find(user_id, tenant_id)
        if user is None:
            return Result.not_found("User")
        return Result.ok(user)

    async def create(self, tenant_id: str | None, data: "UserCreate") -> Result[User]:
        if await self.user_repo.username_exists(data.username):
            return Result.fail("Username already exists", ErrorType.DOMAIN)
        if await self.user_repo.email_exists(data.email):
            return Result.fail("Email already exists", ErrorType.DOMAIN)

        if tenant_id is not None:
            tenant = await self.tenant_repo.get_by_id(tenant_id)
            if tenant is None:
                return Result.not_found("Tenant")
            if not tenant.can_add_user(await self.user_repo.count_in_tenant(tenant_id)):
                return Result.fail("Tenant has reached its user limit", ErrorType.DOMAIN)

        roles = await self.role_repo.get_many_visible(data.role_ids, tenant_id)
        if len(roles) != len(set(data.role_ids)):
            return Result.fail("One or more roles not found", ErrorType.NOT_FOUND)

        actor = get_current_actor()
        user = User(
            tenant_id=tenant_id,
            username=data.username,
            email=data.email,
            password_hash=get_password_hash(data.password),
            first_name=data.first_name,
            last_name=data.last_name,
            phone=data.phone,
            is_active=data.is_active,
            created_by=actor,
        )
        user.user_roles = [
            UserRole(role=role, role_id=role.id, assigned_by=actor) for role in roles
        ]
        created = await self.user_repo.create(user)
        logger.info("Created user %s", created.id)
        return Result.ok(created)

    async def update(self, user_id: str, tenant_id: str | None, data: "UserUpdate") -> Result[User]:
        user = await self._find(user_id, tenant_id)
        if user is None:
            return Result.not_found("User")

        email_changed = data.email is not None and data.email != user.email
        if email_changed and await self.user_repo.email_exists(data.email, exclude_id=user.id):
            return Result.fail("Email already exists", ErrorType.DOMAIN)

        actor = get_current_actor()
        if data.first_name is not None or data.last_name is not None or data.phone is not None:
            user.update_profile(
                actor,
                first_name=data.first_name if data.first_name is not None else user.first_name,
                last_name=data.last_name if data.last_name is not None else user.last_name,
                phone=data.phone if data.phone is not None else user.phone,
            )

        if email_changed:
            user.update_email(actor, data.email)

        if data.is_active is True:
            user.activate(actor)
        elif data.is_active is False:
            user.deactivate(actor)

        updated = await self.user_repo.update(user)
        if data.is_active is False:
            await self.authz_service.invalidate_user_cache(user.id)
        return Result.ok(updated)

    async def delete(self, user_id: str, tenant_id: str | None) -> Result[None]:
        user = await self._find(user_id, tenant_id)
        if user is None:
            return Result.not_found("User")

        # A deleted user keeps no usable session
        user.revoke_refresh_token()
        await self.user_repo.soft_delete(user, get_current_actor())
        await self.authz_service.invalidate_user_cache(user.id)
        logger.info("Deleted user %s", user.id)
        return Result.ok()

    async def restore(self, user_id: str, tenant_id: str | None) -> Result[User]:
        user = await self._find(user_id, tenant_id, include_deleted=True)
        if user is None:
            return Result.not_found("User")
        if not user.is_deleted:
            return Result.fail("User is not deleted", ErrorType.DOMAIN)
        if await self.user_repo.username_exists(user.username, exclude_id=user.id):
            return Result.fail("Username already exists", ErrorType.DOMAIN)
        if await self.user_repo.email_exists(user.email, exclude_id=user.id):
            return Result.fail("Email already exists", ErrorType.DOMAIN)

        return Result.ok(await self.user_repo.restore(user, get_current_actor()))

    async def get_roles(self, user_id: str, tenant_id: str | None) -> Result[list[str]]:
        user = await self._find(user_id, tenant_id)
        if user is None:
            return Result.not_found("User")
        return Result.ok(user.role_names)

    async def assign_roles(
        self, user_id: str, tenant_id: str | None, role_ids: list[str]
    ) -> Result[User]:
        """Make the user's role set exactly ``role_ids``"""
        user = await self._find(user_id, tenant_id)
        if user is None:
            return Result.not_found("User")

        wanted = set(role_ids)
        roles = await self.role_repo.get_many_visible(list(wanted), tenant_id)
        if len(roles) != len(wanted):
            return Result.fail("One or more roles not found", ErrorType.NOT_FOUND)

        actor = get_current_actor()
        current = {ur.role_id for ur in user.user_roles}
        kept = [ur for ur in user.user_roles if ur.role_id in wanted]
        added = [
            UserRole(role=role, role_id=role.id, assigned_by=actor)
            for role in roles
            if role.id not in current
        ]
        removed = current - wanted
        user.user_roles = kept + added
        user.touch(actor)

        updated = await self.user_repo.update(user)
        if added:
            await self.user_repo.emit_custom_audit(
                updated,
                AuditAction.ROLE_ASSIGNED,
                metadata={"role_ids": sorted(link.role_id for link in added)},
            )
        if removed:
            await self.user_repo.emit_custom_audit(
                updated, AuditAction.ROLE_REMOVED, metadata={"role_ids": sorted(removed)}
            )
        await self.authz_service.invalidate_user_cache(user.id)
        return Result.ok(updated)
