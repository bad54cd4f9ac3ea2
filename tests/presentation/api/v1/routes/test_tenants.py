"""Test tenant endpoints"""

import pytest
from fastapi import status

URL = "/api/v1/tenants/"


@pytest.mark.asyncio
async def test_current_tenant(client, admin_headers, seeded):
    response = await client.get(f"{URL}current", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["slug"] == "wms-default"


@pytest.mark.asyncio
async def test_create_tenant(client, admin_headers):
    response = await client.post(URL, headers=admin_headers, json={"name": "Beta", "slug": "Beta-Co"})

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["slug"] == "beta-co"
    assert response.json()["maxUsers"] == 10


@pytest.mark.asyncio
async def test_invalid_slug(client, admin_headers):
    response = await client.post(URL, headers=admin_headers, json={"name": "Bad", "slug": "bad slug!"})

    assert response.status_code == 400
    assert "slug" in response.json()["errors"]


@pytest.mark.asyncio
async def test_cannot_modify_another_tenant(client, admin_headers, other_tenant):
    response = await client.put(f"{URL}{other_tenant.id}", headers=admin_headers, json={"name": "Mine"})

    assert response.status_code == 403
    assert response.json()["message"] == "Cannot modify another tenant"


@pytest.mark.asyncio
async def test_update_own_tenant(client, admin_headers, seeded):
    response = await client.put(
        f"{URL}{seeded.tenant.id}", headers=admin_headers, json={"contactPhone": "+55 11 5555-0000"}
    )

    assert response.status_code == 200
    assert response.json()["contactPhone"] == "+55 11 5555-0000"
