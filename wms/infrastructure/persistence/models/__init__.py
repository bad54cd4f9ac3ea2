"""ORM models. Importing this package registers every table on Base.metadata."""

from wms.infrastructure.persistence.models.audit_log import AuditLog
from wms.infrastructure.persistence.models.company import Company
from wms.infrastructure.persistence.models.customer import Customer
from wms.infrastructure.persistence.models.permission import (Permission,
                                                              RolePermission,
                                                              UserRole)
from wms.infrastructure.persistence.models.product import Product
from wms.infrastructure.persistence.models.role import Role
from wms.infrastructure.persistence.models.tenant import Tenant
from wms.infrastructure.persistence.models.user import User
from wms.infrastructure.persistence.models.warehouse import Warehouse

__all__ = [
    "AuditLog",
    "Company",
    "Customer",
    "Permission",
    "Product",
    "Role",
    "RolePermission",
    "Tenant",
    "User",
    "UserRole",
    "Warehouse",
]
