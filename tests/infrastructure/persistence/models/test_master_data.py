"""Tests for master data invariants enforced by the models"""

from datetime import UTC, datetime
from decimal import Decimal

import pytest

from wms.domain.enums import ProductCategory, ProductType, StorageZone
from wms.domain.exceptions import EntityStateException, ValidationException
from wms.infrastructure.persistence.models.customer import Customer
from wms.infrastructure.persistence.models.product import Product
from wms.infrastructure.persistence.models.tenant import Tenant
from wms.infrastructure.persistence.models.warehouse import Warehouse


def test_soft_delete_sets_tombstone_and_restore_clears_it():
    warehouse = Warehouse(tenant_id="t1", name="Main", code="WH-01", country="BRA")

    warehouse.mark_as_deleted("admin")

    assert warehouse.is_deleted is True
    assert warehouse.deleted_at is not None
    assert warehouse.deleted_by == "admin"

    warehouse.restore("admin")

    assert warehouse.is_deleted is False
    assert warehouse.deleted_at is None
    assert warehouse.deleted_by is None


def test_deleting_twice_is_rejected():
    warehouse = Warehouse(tenant_id="t1", name="Main", code="WH-01", country="BRA")
    warehouse.mark_as_deleted("admin")

    with pytest.raises(EntityStateException):
        warehouse.mark_as_deleted("admin")


def test_blank_required_text_is_rejected():
    with pytest.raises(ValidationException):
        Warehouse(tenant_id="t1", name="   ", code="WH-01", country="BRA")


def test_customer_type_must_be_pj_or_pf():
    with pytest.raises(ValidationException) as exc_info:
        Customer(tenant_id="t1", name="ACME", customer_type="XX")

    assert exc_info.value.field == "customer_type"


def test_product_storage_ranges_must_be_ordered():
    product = Product(
        tenant_id="t1",
        sku="SKU-1",
        name="Vaccine",
        min_storage_temperature=Decimal("8"),
        max_storage_temperature=Decimal("2"),
    )

    with pytest.raises(ValidationException) as exc_info:
        product.validate_storage_conditions()

    assert exc_info.value.field == "min_storage_temperature"


def test_product_update_with_inverted_humidity_changes_nothing():
    product = Product(tenant_id="t1", sku="SKU-1", name="Vaccine")
    fields = dict(
        name="Renamed",
        description=None,
        category=ProductCategory.REFRIGERATED.value,
        product_type=ProductType.COMMODITY.value,
        default_storage_zone=StorageZone.PICKING.value,
        abc_classification=None,
        unit_weight=Decimal("1"),
        unit_volume=Decimal("1"),
        unit_cost=None,
        unit_price=None,
        requires_lot_tracking=True,
        requires_serial_number=False,
        shelf_life_days=30,
        min_storage_temperature=Decimal("2"),
        max_storage_temperature=Decimal("8"),
        min_storage_humidity=Decimal("80"),
        max_storage_humidity=Decimal("40"),
        is_flammable=False,
        is_dangerous=False,
        is_pharmaceutical=True,
    )

    with pytest.raises(ValidationException) as exc_info:
        product.update_info("tester", **fields)

    assert exc_info.value.field == "min_storage_humidity"
    assert product.name == "Vaccine"
    assert product.updated_by is None

    fields["max_storage_humidity"] = Decimal("90")
    product.update_info("tester", **fields)

    assert product.name == "Renamed"
    assert product.category == ProductCategory.REFRIGERATED.value
    assert product.updated_by == "tester"


def test_tenant_subscription_end_must_follow_start():
    with pytest.raises(ValidationException):
        Tenant.validate_subscription(
            datetime(2025, 6, 1, tzinfo=UTC), datetime(2025, 1, 1, tzinfo=UTC), max_users=5
        )


def test_tenant_user_limit():
    tenant = Tenant(name="Acme", slug="acme", is_active=True, max_users=2)

    assert tenant.can_add_user(1)
    assert not tenant.can_add_user(2)


def test_inactive_tenant_cannot_add_users():
    tenant = Tenant(name="Acme", slug="acme", is_active=False, max_users=10)

    assert not tenant.can_add_user(0)
