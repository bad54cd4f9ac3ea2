"""Shared test fixtures for pytest"""
import os
import tempfile
from pathlib import Path

# Configure the application before anything from wms is imported
_test_dir = Path(tempfile.mkdtemp(prefix="wms-tests-"))
os.environ.update(
    {
        "DATABASE_URL": f"sqlite+aiosqlite:///{_test_dir / 'test.db'}",
        "SECRET_KEY": "test-secret-key-that-is-at-least-32-characters",
        "BCRYPT_ROUNDS": "4",
        "REDIS_ENABLED": "false",
        "RATE_LIMIT_ENABLED": "false",
        "TELEMETRY_ENABLED": "false",
        "SEED_ADMIN_PASSWORD": "Admin@12345",
    }
)

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

import wms.infrastructure.persistence.models  # noqa: E402,F401
from main import app  # noqa: E402
from wms.application.services.seed_service import SeedService  # noqa: E402
from wms.infrastructure.persistence.database import (  # noqa: E402
    AsyncSessionLocal, Base, engine)
from wms.infrastructure.persistence.models import Tenant  # noqa: E402
from wms.shared.context import (RequestContext,  # noqa: E402
                                clear_request_context, set_request_context)
from wms.shared.enums import ActorType  # noqa: E402
from tests.helpers import auth_headers_for, create_user  # noqa: E402


@pytest.fixture(autouse=True)
async def test_engine():
    """Fresh schema for every test"""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    clear_request_context()
    await engine.dispose()


@pytest.fixture
async def test_db(test_engine):
    """Session for arranging and inspecting data outside the API"""
    async with AsyncSessionLocal() as session:
        yield session


@pytest.fixture
async def client():
    """HTTP client for API testing"""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def seeded(test_db):
    """Default tenant, system permissions and roles, admin user"""
    result = await SeedService(test_db).seed()
    await test_db.commit()
    return result


@pytest.fixture
def actor():
    """Publish an authenticated caller for service-level tests"""

    def _set(user_id: str = "test-actor", tenant_id: str | None = None, username: str = "tester"):
        set_request_context(
            RequestContext(
                user_id=user_id,
                tenant_id=tenant_id,
                username=username,
                actor_type=ActorType.USER,
            )
        )

    return _set


@pytest.fixture
def admin_headers(seeded):
    return auth_headers_for(seeded.admin_user)


@pytest.fixture
async def other_tenant(test_db, seeded):
    tenant = Tenant(name="Other Tenant", slug="other", is_active=True, max_users=10, created_by="test")
    test_db.add(tenant)
    await test_db.commit()
    await test_db.refresh(tenant)
    return tenant


@pytest.fixture
async def basic_user(test_db, seeded):
    """User with the read-only 'User' role in the default tenant"""
    return await create_user(test_db, "operator", tenant_id=seeded.tenant.id, role_names=["User"])


@pytest.fixture
def basic_headers(basic_user):
    return auth_headers_for(basic_user)
