"""Data builders shared by the test modules"""
from sqlalchemy import select

from wms.infrastructure.persistence.models import Role, User, UserRole
from wms.infrastructure.security.jwt import create_access_token
from wms.infrastructure.security.password import get_password_hash

ADMIN_PASSWORD = "Admin@12345"
USER_PASSWORD = "User@12345"


async def create_user(
    db,
    username: str,
    *,
    tenant_id: str | None,
    role_names: list[str] | None = None,
    password: str = USER_PASSWORD,
) -> User:
    """Insert a user holding the given global roles"""
    user = User(
        tenant_id=tenant_id,
        username=username,
        email=f"{username}@example.com",
        password_hash=get_password_hash(password),
        is_active=True,
        created_by="test",
    )
    for name in role_names or []:
        role = (await db.execute(select(Role).where(Role.name == name))).scalar_one()
        user.user_roles.append(UserRole(role=role, role_id=role.id, assigned_by="test"))
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


def auth_headers_for(user: User, tenant_id: str | None = None) -> dict[str, str]:
    """Bearer header for a user; permissions are resolved from the database"""
    token = create_access_token(
        data={
            "sub": user.id,
            "tenant_id": tenant_id if tenant_id is not None else user.tenant_id,
            "username": user.username,
            "email": user.email,
        }
    )
    return {"Authorization": f"Bearer {token}"}
