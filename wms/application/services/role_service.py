from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from wms.application.result import ErrorType, Result
from wms.application.services.authorization_service import AuthorizationService
from wms.domain.exceptions import RoleInUseException, SystemRoleModificationError
from wms.infrastructure.persistence.models.permission import RolePermission
from wms.infrastructure.persistence.models.role import Role
from wms.infrastructure.persistence.repositories.permission_repo import \
    PermissionRepository
from wms.infrastructure.persistence.repositories.role_repo import RoleRepository
from wms.shared.context import get_current_actor
from wms.shared.enums import AuditAction
from wms.shared.telemetry.logging import get_logger

if TYPE_CHECKING:
    from wms.presentation.api.v1.schemas.role import RoleCreate, RoleUpdate

logger = get_logger(__name__)


@dataclass
class RoleWithUsage:
    role: Role
    user_count: int


class RoleService:
    """
    Role administration.

    A caller sees global roles plus the roles of its own tenant, and may
    only change roles of its own scope. System roles are read-only.
    """

    def __init__(
        self,
        role_repo: RoleRepository,
        permission_repo: PermissionRepository,
        authz_service: AuthorizationService,
    ) -> None:
        self.role_repo = role_repo
        self.permission_repo = permission_repo
        self.authz_service = authz_service

    async def _find_owned(self, role_id: str, tenant_id: str | None) -> Result[Role]:
        role = await self.role_repo.get_visible(role_id, tenant_id)
        if role is None:
            return Result.not_found("Role")
        # System roles fall through so the model reports them as protected
        if role.tenant_id != tenant_id and not role.is_system_role:
            return Result.fail(
                "Global roles can only be changed by a global administrator",
                ErrorType.FORBIDDEN,
            )
        return Result.ok(role)

    async def _resolve_permissions(self, permission_ids: list[str]):
        wanted = set(permission_ids)
        permissions = await self.permission_repo.get_many(list(wanted))
        if len(permissions) != len(wanted):
            return None
        return permissions

    async def list(self, tenant_id: str | None) -> Result[list[RoleWithUsage]]:
        roles = await self.role_repo.list_visible(tenant_id)
        counts = await self.role_repo.count_users_by_role([role.id for role in roles])
        return Result.ok([RoleWithUsage(role, counts.get(role.id, 0)) for role in roles])

    async def get(self, role_id: str, tenant_id: str | None) -> Result[RoleWithUsage]:
        role = await self.role_repo.get_visible(role_id, tenant_id)
        if role is None:
            return Result.not_found("Role")
        return Result.ok(RoleWithUsage(role, await self.role_repo.count_users(role.id)))

    async def create(self, tenant_id: str | None, data: "RoleCreate") -> Result[RoleWithUsage]:
        if await self.role_repo.name_exists(data.name, tenant_id):
            return Result.fail(f"Role '{data.name}' already exists", ErrorType.DOMAIN)

        permissions = await self._resolve_permissions(data.permission_ids)
        if permissions is None:
            return Result.fail("One or more permissions not found", ErrorType.NOT_FOUND)

        actor = get_current_actor()
        role = Role(
            tenant_id=tenant_id,
            name=data.name,
            description=data.description,
            is_system_role=False,
            created_by=actor,
        )
        role.role_permissions = [
            RolePermission(permission=permission, permission_id=permission.id, assigned_by=actor)
            for permission in permissions
        ]

        created = await self.role_repo.create(role)
        logger.info("Created role %s (%s)", created.id, created.name)
        return Result.ok(RoleWithUsage(created, 0))

    async def update(
        self, role_id: str, tenant_id: str | None, data: "RoleUpdate"
    ) -> Result[RoleWithUsage]:
        found = await self._find_owned(role_id, tenant_id)
        if found.is_failure:
            return found.forward()
        role = found.value
        assert role is not None

        name = data.name if data.name is not None else role.name
        if name != role.name and await self.role_repo.name_exists(
            name, role.tenant_id, exclude_id=role.id
        ):
            return Result.fail(f"Role '{name}' already exists", ErrorType.DOMAIN)

        try:
            role.update(
                get_current_actor(),
                name=name,
                description=data.description if data.description is not None else role.description,
            )
        except SystemRoleModificationError as e:
            return Result.fail(e.message, ErrorType.DOMAIN)

        updated = await self.role_repo.update(role)
        return Result.ok(RoleWithUsage(updated, await self.role_repo.count_users(role.id)))

    async def delete(self, role_id: str, tenant_id: str | None) -> Result[None]:
        found = await self._find_owned(role_id, tenant_id)
        if found.is_failure:
            return found.forward()
        role = found.value
        assert role is not None

        try:
            role.ensure_deletable(await self.role_repo.count_users(role.id))
        except (SystemRoleModificationError, RoleInUseException) as e:
            return Result.fail(e.message, ErrorType.DOMAIN)

        await self.role_repo.soft_delete(role, get_current_actor())
        logger.info("Deleted role %s (%s)", role.id, role.name)
        return Result.ok()

    async def assign_permissions(
        self, role_id: str, tenant_id: str | None, permission_ids: list[str]
    ) -> Result[RoleWithUsage]:
        """Replace the role's permission set and drop cached permissions of its holders"""
        found = await self._find_owned(role_id, tenant_id)
        if found.is_failure:
            return found.forward()
        role = found.value
        assert role is not None

        permissions = await self._resolve_permissions(permission_ids)
        if permissions is None:
            return Result.fail("One or more permissions not found", ErrorType.NOT_FOUND)

        before = set(role.permission_codes)
        try:
            role.replace_permissions(permissions, get_current_actor())
        except SystemRoleModificationError as e:
            return Result.fail(e.message, ErrorType.DOMAIN)

        updated = await self.role_repo.update(role)
        after = set(updated.permission_codes)
        if after - before:
            await self.role_repo.emit_custom_audit(
                updated, AuditAction.PERMISSION_GRANTED, metadata={"codes": sorted(after - before)}
            )
        if before - after:
            await self.role_repo.emit_custom_audit(
                updated, AuditAction.PERMISSION_REVOKED, metadata={"codes": sorted(before - after)}
            )

        await self.authz_service.invalidate_users_cache(await self.role_repo.get_user_ids(role.id))
        return Result.ok(RoleWithUsage(updated, await self.role_repo.count_users(role.id)))
