from wms.application.services.audit_service import AuditService
from wms.application.services.authentication_service import (
    AuthenticationResult, AuthenticationService)
from wms.application.services.authorization_service import AuthorizationService
from wms.application.services.company_service import CompanyService
from wms.application.services.customer_service import CustomerService
from wms.application.services.permission_service import PermissionService
from wms.application.services.product_service import ProductService
from wms.application.services.role_service import RoleService, RoleWithUsage
from wms.application.services.seed_service import SeedResult, SeedService
from wms.application.services.tenant_service import TenantService
from wms.application.services.user_service import UserService
from wms.application.services.warehouse_service import WarehouseService

__all__ = [
    "AuditService",
    "AuthenticationResult",
    "AuthenticationService",
    "AuthorizationService",
    "CompanyService",
    "CustomerService",
    "PermissionService",
    "ProductService",
    "RoleService",
    "RoleWithUsage",
    "SeedResult",
    "SeedService",
    "TenantService",
    "UserService",
    "WarehouseService",
]
