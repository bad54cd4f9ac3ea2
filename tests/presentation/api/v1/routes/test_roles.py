"""Test role and permission endpoints"""

import pytest
from fastapi import status
from sqlalchemy import select

from wms.infrastructure.persistence.models import Role

URL = "/api/v1/roles/"


@pytest.mark.asyncio
async def test_list_includes_system_roles_with_usage(client, admin_headers):
    response = await client.get(URL, headers=admin_headers)

    assert response.status_code == 200
    by_name = {r["name"]: r for r in response.json()}
    assert {"Admin", "User", "WarehouseManager"} <= set(by_name)
    assert by_name["Admin"]["isSystemRole"] is True
    assert by_name["Admin"]["userCount"] == 1


@pytest.mark.asyncio
async def test_system_role_cannot_be_updated(client, admin_headers, test_db):
    admin_role = (await test_db.execute(select(Role).where(Role.name == "Admin"))).scalar_one()

    response = await client.put(
        f"{URL}{admin_role.id}", headers=admin_headers, json={"name": "Root"}
    )

    assert response.status_code == 400
    assert response.json()["message"] == "System role 'Admin' cannot be updated"


@pytest.mark.asyncio
async def test_custom_role_lifecycle(client, admin_headers):
    permissions = (await client.get("/api/v1/permissions/?module=MasterData", headers=admin_headers)).json()
    read_ids = [p["id"] for p in permissions if p["action"] == "read"]

    created = await client.post(
        URL, headers=admin_headers, json={"name": "Auditor", "permissionIds": read_ids}
    )
    assert created.status_code == status.HTTP_201_CREATED
    role = created.json()
    assert role["isSystemRole"] is False
    assert len(role["permissions"]) == len(read_ids)

    reassigned = await client.post(
        f"{URL}{role['id']}/permissions", headers=admin_headers, json={"permissionIds": read_ids[:1]}
    )
    assert reassigned.status_code == 200
    assert len(reassigned.json()["permissions"]) == 1

    assert (await client.delete(f"{URL}{role['id']}", headers=admin_headers)).status_code == 204
    assert (await client.get(f"{URL}{role['id']}", headers=admin_headers)).status_code == 404


@pytest.mark.asyncio
async def test_permission_modules(client, admin_headers):
    response = await client.get("/api/v1/permissions/modules", headers=admin_headers)

    assert response.status_code == 200
    assert {"Administration", "MasterData"} <= set(response.json())


@pytest.mark.asyncio
async def test_permissions_require_permission_read(client, basic_headers):
    response = await client.get("/api/v1/permissions/", headers=basic_headers)

    assert response.status_code == 403
