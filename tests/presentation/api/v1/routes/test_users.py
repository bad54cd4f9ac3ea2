"""Test user administration endpoints"""

import pytest
from fastapi import status
from sqlalchemy import select

from tests.helpers import create_user
from wms.infrastructure.persistence.models import Role

URL = "/api/v1/users/"


async def role_id(db, name: str) -> str:
    return (await db.execute(select(Role.id).where(Role.name == name))).scalar_one()


@pytest.mark.asyncio
async def test_me(client, admin_headers, seeded):
    response = await client.get(f"{URL}me", headers=admin_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == seeded.admin_user.id
    assert data["roles"] == ["Admin"]
    assert "*:*" in data["permissions"]
    assert "passwordHash" not in data


@pytest.mark.asyncio
async def test_create_user_with_role(client, admin_headers, test_db):
    response = await client.post(
        URL,
        headers=admin_headers,
        json={
            "username": "picker",
            "email": "picker@example.com",
            "password": "Picker@123",
            "roleIds": [await role_id(test_db, "User")],
        },
    )

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["roles"] == ["User"]


@pytest.mark.asyncio
async def test_read_only_user_cannot_list_users(client, basic_headers):
    response = await client.get(URL, headers=basic_headers)

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_assign_roles(client, admin_headers, basic_user, test_db):
    manager = await role_id(test_db, "WarehouseManager")

    response = await client.post(
        f"{URL}{basic_user.id}/roles", headers=admin_headers, json={"roleIds": [manager]}
    )

    assert response.status_code == 200
    assert response.json()["roles"] == ["WarehouseManager"]
    roles = await client.get(f"{URL}{basic_user.id}/roles", headers=admin_headers)
    assert roles.json() == ["WarehouseManager"]


@pytest.mark.asyncio
async def test_delete_and_restore(client, admin_headers, basic_user):
    assert (await client.delete(f"{URL}{basic_user.id}", headers=admin_headers)).status_code == 204

    trash = (await client.get(f"{URL}deleted", headers=admin_headers)).json()
    assert [u["id"] for u in trash] == [basic_user.id]
    assert trash[0]["deletedAt"] is not None

    restored = await client.patch(f"{URL}{basic_user.id}/restore", headers=admin_headers)
    assert restored.status_code == 200


@pytest.mark.asyncio
async def test_rejected_update_leaves_user_unchanged(client, admin_headers, basic_user, test_db):
    holder = await create_user(test_db, "holder", tenant_id=basic_user.tenant_id)

    response = await client.put(
        f"{URL}{basic_user.id}",
        headers=admin_headers,
        json={"firstName": "Renamed", "email": holder.email},
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["message"] == "Email already exists"
    stored = (await client.get(f"{URL}{basic_user.id}", headers=admin_headers)).json()
    assert stored["firstName"] is None
    assert stored["email"] == basic_user.email
