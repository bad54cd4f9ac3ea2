"""
Bootstrap data: default tenant, permission catalogue, system roles and an
administrator account.

Idempotent: existing rows are looked up by their natural keys and left
alone, so the seeder can run on every deployment.
"""

from __future__ import annotations

import secrets
import string
from dataclasses import dataclass, field
from typing import TypedDict

from sqlalchemy.ext.asyncio import AsyncSession

from wms.infrastructure.config.settings import get_settings
from wms.infrastructure.persistence.models.permission import (Permission,
                                                              RolePermission,
                                                              UserRole)
from wms.infrastructure.persistence.models.role import Role
from wms.infrastructure.persistence.models.tenant import Tenant
from wms.infrastructure.persistence.models.user import User
from wms.infrastructure.persistence.repositories.permission_repo import \
    PermissionRepository
from wms.infrastructure.persistence.repositories.role_repo import RoleRepository
from wms.infrastructure.persistence.repositories.tenant_repo import TenantRepository
from wms.infrastructure.persistence.repositories.user_repo import UserRepository
from wms.infrastructure.security.password import get_password_hash
from wms.shared.context import SYSTEM_ACTOR
from wms.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class RoleData(TypedDict):
    """Type definition for role configuration"""

    description: str
    permissions: list[str]


# (name, resource, action, description, module)
SYSTEM_PERMISSIONS = [
    # Administration
    ("Users.View", "user", "read", "View users", "Administration"),
    ("Users.Create", "user", "create", "Create users", "Administration"),
    ("Users.Edit", "user", "update", "Edit users", "Administration"),
    ("Users.Delete", "user", "delete", "Delete and restore users", "Administration"),
    ("Roles.View", "role", "read", "View roles", "Administration"),
    ("Roles.Create", "role", "create", "Create roles", "Administration"),
    ("Roles.Edit", "role", "update", "Edit roles and their permissions", "Administration"),
    ("Roles.Delete", "role", "delete", "Delete roles", "Administration"),
    ("Roles.Assign", "role", "assign", "Assign roles to users", "Administration"),
    ("Permissions.View", "permission", "read", "View the permission catalogue", "Administration"),
    ("Tenants.View", "tenant", "read", "View tenants", "Administration"),
    ("Tenants.Create", "tenant", "create", "Create tenants", "Administration"),
    ("Tenants.Edit", "tenant", "update", "Edit tenants", "Administration"),
    ("Audit.View", "audit", "read", "View audit logs", "Administration"),
    # Master data
    ("Companies.View", "company", "read", "View company data", "MasterData"),
    ("Companies.Create", "company", "create", "Register the company", "MasterData"),
    ("Companies.Edit", "company", "update", "Edit company data", "MasterData"),
    ("Companies.Delete", "company", "delete", "Delete the company", "MasterData"),
    ("Warehouses.View", "warehouse", "read", "View warehouses", "MasterData"),
    ("Warehouses.Create", "warehouse", "create", "Create warehouses", "MasterData"),
    ("Warehouses.Edit", "warehouse", "update", "Edit warehouses", "MasterData"),
    ("Warehouses.Delete", "warehouse", "delete", "Delete warehouses", "MasterData"),
    ("Customers.View", "customer", "read", "View customers", "MasterData"),
    ("Customers.Create", "customer", "create", "Create customers", "MasterData"),
    ("Customers.Edit", "customer", "update", "Edit customers", "MasterData"),
    ("Customers.Delete", "customer", "delete", "Delete customers", "MasterData"),
    ("Products.View", "product", "read", "View products", "MasterData"),
    ("Products.Create", "product", "create", "Create products", "MasterData"),
    ("Products.Edit", "product", "update", "Edit products", "MasterData"),
    ("Products.Delete", "product", "delete", "Delete products", "MasterData"),
    # Operations
    ("Inventory.View", "inventory", "read", "View inventory", "Inventory"),
    ("Inventory.Manage", "inventory", "manage", "Manage inventory", "Inventory"),
    ("Orders.View", "order", "read", "View orders", "Orders"),
    ("Orders.Create", "order", "create", "Create orders", "Orders"),
    ("Orders.Manage", "order", "manage", "Manage orders", "Orders"),
    ("Reports.View", "report", "read", "View reports", "Reports"),
    # Wildcard
    ("SuperAdmin", "*", "*", "Super admin - all permissions", "Administration"),
]

# Global system roles. "resource:*" expands to every seeded action on that resource.
DEFAULT_ROLES: dict[str, RoleData] = {
    "Admin": {
        "description": "System administrator with full access",
        "permissions": ["*:*"],
    },
    "WarehouseManager": {
        "description": "Manages warehouses, products and customers",
        "permissions": [
            "company:read",
            "warehouse:*",
            "customer:*",
            "product:*",
            "inventory:*",
            "order:*",
            "report:read",
            "user:read",
        ],
    },
    "User": {
        "description": "Standard user with read access to master data",
        "permissions": [
            "company:read",
            "warehouse:read",
            "customer:read",
            "product:read",
            "inventory:read",
            "order:read",
        ],
    },
}


@dataclass
class SeedResult:
    tenant: Tenant
    admin_user: User
    admin_password: str | None = None  # Set only when generated by this run
    created: list[str] = field(default_factory=list)


class SeedService:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db
        self.settings = get_settings()
        self.tenant_repo = TenantRepository(db)
        self.permission_repo = PermissionRepository(db)
        self.role_repo = RoleRepository(db)
        self.user_repo = UserRepository(db)

    async def seed(self) -> SeedResult:
        created: list[str] = []
        tenant = await self._seed_tenant(created)
        permission_map = await self._seed_permissions(created)
        roles = await self._seed_roles(permission_map, created)
        admin, password = await self._seed_admin(tenant, roles["Admin"], created)
        await self.db.flush()
        logger.info("Seeding complete (%d new rows)", len(created))
        return SeedResult(tenant=tenant, admin_user=admin, admin_password=password, created=created)

    async def _seed_tenant(self, created: list[str]) -> Tenant:
        tenant = await self.tenant_repo.get_by_slug(self.settings.default_tenant_slug)
        if tenant is not None:
            return tenant

        tenant = await self.tenant_repo.create(
            Tenant(
                name=self.settings.default_tenant_name,
                slug=self.settings.default_tenant_slug,
                contact_email=self.settings.seed_admin_email,
                is_active=True,
                max_users=100,
                created_by=SYSTEM_ACTOR,
            )
        )
        created.append(f"tenant:{tenant.slug}")
        logger.info("Created default tenant %s", tenant.slug)
        return tenant

    async def _seed_permissions(self, created: list[str]) -> dict[str, Permission]:
        """Returns mapping of code -> permission"""
        permission_map: dict[str, Permission] = {}
        for name, resource, action, description, module in SYSTEM_PERMISSIONS:
            permission = await self.permission_repo.get_by_resource_action(resource, action)
            if permission is None:
                permission = await self.permission_repo.create(
                    Permission(
                        name=name,
                        resource=resource,
                        action=action,
                        description=description,
                        module=module,
                        created_by=SYSTEM_ACTOR,
                    )
                )
                created.append(f"permission:{permission.code}")
            permission_map[permission.code] = permission
        return permission_map

    @staticmethod
    def _expand(patterns: list[str], permission_map: dict[str, Permission]) -> list[Permission]:
        """Resolve role patterns; "event:*" means all event permissions"""
        matched: dict[str, Permission] = {}
        for pattern in patterns:
            if pattern != "*:*" and pattern.endswith(":*"):
                prefix = pattern[:-1]
                for code, permission in permission_map.items():
                    if code.startswith(prefix):
                        matched[code] = permission
            elif pattern in permission_map:
                matched[pattern] = permission_map[pattern]
            else:
                logger.warning("Permission not found while seeding: %s", pattern)
        return list(matched.values())

    async def _seed_roles(
        self, permission_map: dict[str, Permission], created: list[str]
    ) -> dict[str, Role]:
        roles: dict[str, Role] = {}
        for name, role_data in DEFAULT_ROLES.items():
            role = await self.role_repo.get_by_name(name, None)
            if role is None:
                role = Role(
                    tenant_id=None,
                    name=name,
                    description=role_data["description"],
                    is_system_role=True,
                    created_by=SYSTEM_ACTOR,
                )
                role.role_permissions = [
                    RolePermission(
                        permission=permission,
                        permission_id=permission.id,
                        assigned_by=SYSTEM_ACTOR,
                    )
                    for permission in self._expand(role_data["permissions"], permission_map)
                ]
                role = await self.role_repo.create(role)
                created.append(f"role:{name}")
                logger.info("Created system role %s", name)
            roles[name] = role
        return roles

    async def _seed_admin(
        self, tenant: Tenant, admin_role: Role, created: list[str]
    ) -> tuple[User, str | None]:
        admin = await self.user_repo.get_by_username(self.settings.seed_admin_username)
        if admin is not None:
            return admin, None

        generated = self.settings.seed_admin_password is None
        password = self.settings.seed_admin_password or self._generate_secure_password()
        admin = User(
            tenant_id=tenant.id,
            username=self.settings.seed_admin_username,
            email=self.settings.seed_admin_email,
            password_hash=get_password_hash(password),
            first_name="System",
            last_name="Administrator",
            is_active=True,
            email_confirmed=True,
            created_by=SYSTEM_ACTOR,
        )
        admin.user_roles = [
            UserRole(role=admin_role, role_id=admin_role.id, assigned_by=SYSTEM_ACTOR)
        ]
        admin = await self.user_repo.create(admin)
        created.append(f"user:{admin.username}")
        logger.info("Created admin user %s", admin.username)
        return admin, password if generated else None

    @staticmethod
    def _generate_secure_password(length: int = 16) -> str:
        """
        Generate a cryptographically secure random password.

        Contains uppercase, lowercase, digits, and special characters.
        """
        alphabet = string.ascii_letters + string.digits + "!@#$%^&*"
        while True:
            password = "".join(secrets.choice(alphabet) for _ in range(length))
            if (
                any(c.islower() for c in password)
                and any(c.isupper() for c in password)
                and any(c.isdigit() for c in password)
                and any(c in "!@#$%^&*" for c in password)
            ):
                return password
