from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from wms.application.services.audit_service import AuditService
from wms.application.services.authentication_service import \
    AuthenticationService
from wms.application.services.authorization_service import AuthorizationService
from wms.application.services.company_service import CompanyService
from wms.application.services.customer_service import CustomerService
from wms.application.services.permission_service import PermissionService
from wms.application.services.product_service import ProductService
from wms.application.services.role_service import RoleService
from wms.application.services.tenant_service import TenantService
from wms.application.services.user_service import UserService
from wms.application.services.warehouse_service import WarehouseService
from wms.domain.exceptions import PermissionDeniedError, TenantContextException
from wms.infrastructure.cache.redis_cache import (CacheService,
                                                  get_cache_service)
from wms.infrastructure.persistence.database import get_db, get_db_transactional
from wms.infrastructure.persistence.repositories import (CompanyRepository,
                                                         CustomerRepository,
                                                         PermissionRepository,
                                                         ProductRepository,
                                                         RoleRepository,
                                                         TenantRepository,
                                                         UserRepository,
                                                         WarehouseRepository)
from wms.infrastructure.security.jwt import verify_token
from wms.shared.context import RequestContext, set_request_context
from wms.shared.enums import ActorType
from wms.shared.telemetry.telemetry import annotate_span

# auto_error=False: anonymous endpoints (login, register) still get a context
security = HTTPBearer(auto_error=False)


async def get_cache() -> CacheService | None:
    """Process-wide cache service, initialized on app startup in main.py"""
    return get_cache_service()


async def get_request_context(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> RequestContext:
    """
    Decode the bearer token once per request and publish the caller.

    Anonymous requests get a context carrying only the client address and
    user agent, so login attempts are still attributed in the audit log.
    """
    ip_address = request.client.host if request.client else None
    user_agent = request.headers.get("user-agent")

    if credentials is None:
        context = RequestContext(ip_address=ip_address, user_agent=user_agent)
        set_request_context(context)
        return context

    try:
        payload = verify_token(credentials.credentials)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    context = RequestContext(
        user_id=user_id,
        tenant_id=payload.get("tenant_id"),
        username=payload.get("username"),
        roles=tuple(payload.get("roles") or ()),
        permissions=tuple(payload.get("permissions") or ()),
        actor_type=ActorType.USER,
        ip_address=ip_address,
        user_agent=user_agent,
    )
    set_request_context(context)
    annotate_span(context)
    return context


async def get_current_context(
    context: RequestContext = Depends(get_request_context),
) -> RequestContext:
    """Authenticated caller; 401 without a valid bearer token"""
    if not context.is_authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return context


async def get_tenant_context(
    context: RequestContext = Depends(get_current_context),
) -> str:
    """
    Tenant of the authenticated caller.

    Taken from the token claims only, never from a header, so it cannot be
    spoofed. Tenant-scoped routes fail with 400 when the claim is missing.
    """
    tenant_id = context.tenant_id
    if not isinstance(tenant_id, str) or not tenant_id.strip():
        raise TenantContextException("Tenant context is missing from the access token")
    return tenant_id


async def get_authz_service(
    db: AsyncSession = Depends(get_db), cache: CacheService | None = Depends(get_cache)
) -> AuthorizationService:
    """Get authorization service for manual permission checks with caching"""
    return AuthorizationService(db, cache_service=cache)


def require_permission(resource: str, action: str):
    """
    Dependency factory for route-level permission checking.

    Usage:
        @router.post("/", dependencies=[Depends(require_permission("warehouse", "create"))])
        async def create_warehouse(...):
            ...
    """

    async def permission_checker(
        context: RequestContext = Depends(get_current_context),
        authz_service: AuthorizationService = Depends(get_authz_service),
    ) -> RequestContext:
        assert context.user_id is not None
        has_permission = await authz_service.check_permission(
            user_id=context.user_id, resource=resource, action=action
        )

        if not has_permission:
            raise PermissionDeniedError(
                f"Permission denied: {resource}:{action} required",
                resource=resource,
                action=action,
            )

        return context

    return permission_checker


# Service builders shared by the read and transactional dependencies
def _build_authentication_service(
    db: AsyncSession, cache: CacheService | None
) -> AuthenticationService:
    audit_service = AuditService(db)
    return AuthenticationService(
        user_repo=UserRepository(db, audit_service),
        tenant_repo=TenantRepository(db, audit_service),
        authz_service=AuthorizationService(db, cache_service=cache),
        audit_service=audit_service,
    )


def _build_user_service(db: AsyncSession, cache: CacheService | None) -> UserService:
    return UserService(
        user_repo=UserRepository(db),
        role_repo=RoleRepository(db),
        tenant_repo=TenantRepository(db),
        authz_service=AuthorizationService(db, cache_service=cache),
    )


def _build_role_service(db: AsyncSession, cache: CacheService | None) -> RoleService:
    return RoleService(
        role_repo=RoleRepository(db),
        permission_repo=PermissionRepository(db),
        authz_service=AuthorizationService(db, cache_service=cache),
    )


async def get_authentication_service_transactional(
    db: AsyncSession = Depends(get_db_transactional),
    cache: CacheService | None = Depends(get_cache),
) -> AuthenticationService:
    """Authentication always writes (counters, tokens, audit rows)"""
    return _build_authentication_service(db, cache)


async def get_user_service(
    db: AsyncSession = Depends(get_db), cache: CacheService | None = Depends(get_cache)
) -> UserService:
    return _build_user_service(db, cache)


async def get_user_service_transactional(
    db: AsyncSession = Depends(get_db_transactional),
    cache: CacheService | None = Depends(get_cache),
) -> UserService:
    return _build_user_service(db, cache)


async def get_role_service(
    db: AsyncSession = Depends(get_db), cache: CacheService | None = Depends(get_cache)
) -> RoleService:
    return _build_role_service(db, cache)


async def get_role_service_transactional(
    db: AsyncSession = Depends(get_db_transactional),
    cache: CacheService | None = Depends(get_cache),
) -> RoleService:
    return _build_role_service(db, cache)


async def get_permission_service(db: AsyncSession = Depends(get_db)) -> PermissionService:
    return PermissionService(PermissionRepository(db))


async def get_tenant_service(db: AsyncSession = Depends(get_db)) -> TenantService:
    return TenantService(TenantRepository(db))


async def get_tenant_service_transactional(
    db: AsyncSession = Depends(get_db_transactional),
) -> TenantService:
    return TenantService(TenantRepository(db))


async def get_company_service(db: AsyncSession = Depends(get_db)) -> CompanyService:
    return CompanyService(CompanyRepository(db))


async def get_company_service_transactional(
    db: AsyncSession = Depends(get_db_transactional),
) -> CompanyService:
    return CompanyService(CompanyRepository(db))


async def get_warehouse_service(db: AsyncSession = Depends(get_db)) -> WarehouseService:
    return WarehouseService(WarehouseRepository(db))


async def get_warehouse_service_transactional(
    db: AsyncSession = Depends(get_db_transactional),
) -> WarehouseService:
    return WarehouseService(WarehouseRepository(db))


async def get_customer_service(db: AsyncSession = Depends(get_db)) -> CustomerService:
    return CustomerService(CustomerRepository(db))


async def get_customer_service_transactional(
    db: AsyncSession = Depends(get_db_transactional),
) -> CustomerService:
    return CustomerService(CustomerRepository(db))


async def get_product_service(db: AsyncSession = Depends(get_db)) -> ProductService:
    return ProductService(ProductRepository(db))


async def get_product_service_transactional(
    db: AsyncSession = Depends(get_db_transactional),
) -> ProductService:
    return ProductService(ProductRepository(db))
