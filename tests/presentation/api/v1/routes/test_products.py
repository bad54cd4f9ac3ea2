"""Test product endpoints"""

import pytest
from fastapi import status

URL = "/api/v1/products/"


@pytest.mark.asyncio
async def test_create_with_defaults(client, admin_headers):
    response = await client.post(URL, headers=admin_headers, json={"sku": "SKU-1", "name": "Widget"})

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["sku"] == "SKU-1"
    assert data["requiresLotTracking"] is False
    assert data["isActive"] is True


@pytest.mark.asyncio
async def test_sku_lookup_routes(client, admin_headers):
    created = (
        await client.post(URL, headers=admin_headers, json={"sku": "SKU-1", "name": "Widget"})
    ).json()

    by_sku = await client.get(f"{URL}sku/SKU-1", headers=admin_headers)
    assert by_sku.status_code == 200
    assert by_sku.json()["id"] == created["id"]

    check = await client.get(f"{URL}check-sku/SKU-1", headers=admin_headers)
    assert check.json() == {"sku": "SKU-1", "exists": True}

    missing = await client.get(f"{URL}sku/NOPE", headers=admin_headers)
    assert missing.status_code == 404
    assert missing.json()["message"] == "Product with this SKU not found"


@pytest.mark.asyncio
async def test_sku_freed_by_delete(client, admin_headers):
    created = (
        await client.post(URL, headers=admin_headers, json={"sku": "SKU-1", "name": "Widget"})
    ).json()
    duplicate = await client.post(URL, headers=admin_headers, json={"sku": "SKU-1", "name": "Other"})
    assert duplicate.status_code == 400

    await client.delete(f"{URL}{created['id']}", headers=admin_headers)
    check = await client.get(f"{URL}check-sku/SKU-1", headers=admin_headers)
    assert check.json()["exists"] is False

    again = await client.post(URL, headers=admin_headers, json={"sku": "SKU-1", "name": "Other"})
    assert again.status_code == status.HTTP_201_CREATED


@pytest.mark.asyncio
async def test_inverted_range_is_a_field_error(client, admin_headers):
    response = await client.post(
        URL,
        headers=admin_headers,
        json={"sku": "COLD", "name": "Vaccine", "minStorageTemperature": 8, "maxStorageTemperature": 2},
    )

    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Minimum storage temperature cannot exceed maximum"
    assert body["errors"] == {
        "min_storage_temperature": ["Minimum storage temperature cannot exceed maximum"]
    }
