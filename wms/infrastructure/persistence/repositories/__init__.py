from wms.infrastructure.persistence.repositories.base import (BaseRepository,
                                                              TenantScopedRepository)
from wms.infrastructure.persistence.repositories.company_repo import CompanyRepository
from wms.infrastructure.persistence.repositories.customer_repo import CustomerRepository
from wms.infrastructure.persistence.repositories.permission_repo import PermissionRepository
from wms.infrastructure.persistence.repositories.product_repo import ProductRepository
from wms.infrastructure.persistence.repositories.role_repo import RoleRepository
from wms.infrastructure.persistence.repositories.tenant_repo import TenantRepository
from wms.infrastructure.persistence.repositories.user_repo import UserRepository
from wms.infrastructure.persistence.repositories.warehouse_repo import WarehouseRepository

__all__ = [
    "BaseRepository",
    "TenantScopedRepository",
    "CompanyRepository",
    "CustomerRepository",
    "PermissionRepository",
    "ProductRepository",
    "RoleRepository",
    "TenantRepository",
    "UserRepository",
    "WarehouseRepository",
]
