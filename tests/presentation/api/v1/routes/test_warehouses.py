"""Test warehouse endpoints"""

import pytest
from fastapi import status

from tests.helpers import auth_headers_for

URL = "/api/v1/warehouses/"


async def create_warehouse(client, headers, code: str = "WH-01", **extra):
    response = await client.post(URL, headers=headers, json={"name": f"Warehouse {code}", "code": code, **extra})
    assert response.status_code == status.HTTP_201_CREATED, response.text
    return response.json()


@pytest.mark.asyncio
async def test_create_and_get(client, admin_headers, seeded):
    created = await create_warehouse(
        client, admin_headers, city="Campinas", openingTime="08:00:00", totalPositions=1200
    )

    assert created["tenantId"] == seeded.tenant.id
    assert created["status"] == "active"
    assert created["country"] == "BRA"
    assert created["isDeleted"] is False
    assert created["createdBy"] == "admin"

    response = await client.get(f"{URL}{created['id']}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["city"] == "Campinas"
    assert response.json()["totalPositions"] == 1200


@pytest.mark.asyncio
async def test_requires_authentication(client):
    response = await client.get(URL)

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    body = response.json()
    assert body["statusCode"] == 401
    assert "timestamp" in body
    assert "traceId" in body


@pytest.mark.asyncio
async def test_read_only_role_cannot_create(client, basic_headers):
    listed = await client.get(URL, headers=basic_headers)
    assert listed.status_code == 200

    response = await client.post(URL, headers=basic_headers, json={"name": "X", "code": "WH-09"})

    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["message"] == "Permission denied: warehouse:create required"


@pytest.mark.asyncio
async def test_missing_tenant_claim(client, seeded):
    headers = auth_headers_for(seeded.admin_user, tenant_id="")

    response = await client.get(URL, headers=headers)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["message"] == "Tenant context is missing from the access token"


@pytest.mark.asyncio
async def test_duplicate_code(client, admin_headers):
    await create_warehouse(client, admin_headers)

    response = await client.post(URL, headers=admin_headers, json={"name": "Again", "code": "WH-01"})

    assert response.status_code == 400
    assert response.json()["message"] == "Warehouse with code 'WH-01' already exists"


@pytest.mark.asyncio
async def test_validation_errors_are_mapped_by_field(client, admin_headers):
    response = await client.post(URL, headers=admin_headers, json={"name": "", "latitude": 91})

    assert response.status_code == 400
    errors = response.json()["errors"]
    assert set(errors) >= {"name", "code", "latitude"}
    assert all(isinstance(messages, list) for messages in errors.values())


@pytest.mark.asyncio
async def test_soft_delete_lifecycle(client, admin_headers):
    """
    GIVEN warehouse WH-01
    WHEN it is deleted
    THEN it leaves the listing, shows up as deleted, and WH-01 can be created again.
    """
    created = await create_warehouse(client, admin_headers)

    deleted = await client.delete(f"{URL}{created['id']}", headers=admin_headers)
    assert deleted.status_code == status.HTTP_204_NO_CONTENT

    listed = await client.get(URL, headers=admin_headers)
    assert created["id"] not in [w["id"] for w in listed.json()]
    assert (await client.get(f"{URL}{created['id']}", headers=admin_headers)).status_code == 404

    trash = (await client.get(f"{URL}deleted", headers=admin_headers)).json()
    assert [w["id"] for w in trash] == [created["id"]]
    assert trash[0]["deletedAt"] is not None
    assert trash[0]["deletedBy"] == "admin"

    await create_warehouse(client, admin_headers)

    restore = await client.patch(f"{URL}{created['id']}/restore", headers=admin_headers)
    assert restore.status_code == 400


@pytest.mark.asyncio
async def test_restore(client, admin_headers):
    created = await create_warehouse(client, admin_headers, code="WH-02")
    await client.delete(f"{URL}{created['id']}", headers=admin_headers)

    response = await client.patch(f"{URL}{created['id']}/restore", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["isDeleted"] is False


@pytest.mark.asyncio
async def test_update(client, admin_headers):
    created = await create_warehouse(client, admin_headers)

    response = await client.put(
        f"{URL}{created['id']}", headers=admin_headers, json={"name": "Main DC", "status": "maintenance"}
    )

    assert response.status_code == 200
    assert response.json()["name"] == "Main DC"
    assert response.json()["status"] == "maintenance"
    assert response.json()["updatedBy"] == "admin"


@pytest.mark.asyncio
async def test_tenants_are_isolated(client, admin_headers, test_db, other_tenant):
    from tests.helpers import create_user

    created = await create_warehouse(client, admin_headers)
    outsider = await create_user(test_db, "outsider", tenant_id=other_tenant.id, role_names=["Admin"])
    headers = auth_headers_for(outsider)

    assert (await client.get(f"{URL}{created['id']}", headers=headers)).status_code == 404
    assert (await client.get(URL, headers=headers)).json() == []
