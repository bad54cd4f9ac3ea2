import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from wms.infrastructure.cache.redis_cache import (CacheService,
                                                  get_cache_service,
                                                  set_cache_service)
from wms.infrastructure.config.settings import get_settings
from wms.infrastructure.persistence.database import engine, get_db
from wms.presentation.api.dependencies import get_request_context
from wms.presentation.api.errors import register_exception_handlers
from wms.presentation.api.v1.routes import (auth, companies, customers,
                                            permissions, products, roles,
                                            tenants, users, warehouses)
from wms.presentation.middleware.correlation import CorrelationIDMiddleware
from wms.presentation.middleware.rate_limit import limiter
from wms.presentation.middleware.security import (RequestSizeLimitMiddleware,
                                                  SecurityHeadersMiddleware)
from wms.presentation.middleware.timeout import TimeoutMiddleware
from wms.shared.telemetry.logging import setup_logging
from wms.shared.telemetry.telemetry import Tracing, get_tracing, set_tracing

logger = logging.getLogger(__name__)

settings = get_settings()

API_PREFIX = "/api/v1"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan events for application initialization and cleanup"""
    # Initialize logging
    setup_logging()

    # Initialize OpenTelemetry distributed tracing
    if settings.telemetry_enabled:
        try:
            tracing = Tracing.from_settings(settings)
            tracing.instrument(app, engine, redis=settings.redis_enabled)
            set_tracing(tracing)
        except Exception as e:
            logger.warning("Telemetry initialization failed: %s. Continuing without tracing.", e)
    else:
        logger.info("Distributed tracing disabled in configuration")

    # Initialize Redis cache
    if settings.redis_enabled:
        cache_service = CacheService()
        await cache_service.connect()
        set_cache_service(cache_service)
    else:
        logger.info("Redis cache disabled in configuration")

    yield

    # Flush remaining spans
    tracing = get_tracing()
    if tracing is not None:
        tracing.shutdown()
        set_tracing(None)

    cache = get_cache_service()
    if cache is not None:
        await cache.disconnect()
        set_cache_service(None)

    await engine.dispose()
    logger.info("Database engine disposed")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    debug=settings.debug,
    lifespan=lifespan,
)

# Error envelope for domain, validation, HTTP, rate-limit and unexpected errors
register_exception_handlers(app)

# Configure rate limiter
app.state.limiter = limiter

# Middleware (order matters - the last one added runs first)
# 1. Request timeout (innermost)
app.add_middleware(TimeoutMiddleware, timeout=settings.request_timeout_seconds)

# 2. Request size limit
app.add_middleware(RequestSizeLimitMiddleware, max_request_size=settings.max_request_size)

# 3. Security headers
app.add_middleware(SecurityHeadersMiddleware, force_hsts=settings.environment == "production")

# 4. Correlation ID, outside the above so their error bodies carry the trace id
app.add_middleware(CorrelationIDMiddleware)

# 5. CORS middleware
# Security: Using allow_credentials=True requires specific origins (not wildcard)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers. Every API request gets a RequestContext, anonymous or not.
_context = [Depends(get_request_context)]
app.include_router(auth.router, prefix=f"{API_PREFIX}/auth", tags=["authentication"], dependencies=_context)
app.include_router(users.router, prefix=f"{API_PREFIX}/users", tags=["users"], dependencies=_context)
app.include_router(roles.router, prefix=f"{API_PREFIX}/roles", tags=["roles"], dependencies=_context)
app.include_router(
    permissions.router, prefix=f"{API_PREFIX}/permissions", tags=["permissions"], dependencies=_context
)
app.include_router(tenants.router, prefix=f"{API_PREFIX}/tenants", tags=["tenants"], dependencies=_context)
app.include_router(
    companies.router, prefix=f"{API_PREFIX}/companies", tags=["companies"], dependencies=_context
)
app.include_router(
    warehouses.router, prefix=f"{API_PREFIX}/warehouses", tags=["warehouses"], dependencies=_context
)
app.include_router(
    customers.router, prefix=f"{API_PREFIX}/customers", tags=["customers"], dependencies=_context
)
app.include_router(
    products.router, prefix=f"{API_PREFIX}/products", tags=["products"], dependencies=_context
)


@app.get("/")
async def root():
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "status": "running",
    }


@app.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)):
    """
    Health check endpoint for load balancers and monitoring.

    Validates:
    - API is responsive
    - Database connectivity
    - Redis cache availability (optional)

    Returns:
    - 200 OK if healthy
    - 503 Service Unavailable if unhealthy
    """
    checks: dict[str, Any] = {
        "api": True,  # If we got here, API is responding
        "database": False,
        "cache": None,  # None = not configured, True = healthy, False = unhealthy
    }

    try:
        await db.execute(text("SELECT 1"))
        checks["database"] = True
    except Exception as e:
        logger.error("Health check database failure: %s", e)
        checks["error"] = "database unavailable"

    cache = get_cache_service()
    if cache is not None:
        checks["cache"] = cache.is_available()

    # Cache is optional, database and API are required
    if checks["api"] and checks["database"]:
        return {"status": "healthy", "checks": checks}
    return JSONResponse(status_code=503, content={"status": "unhealthy", "checks": checks})
