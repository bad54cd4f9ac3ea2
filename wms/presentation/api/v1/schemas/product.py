from decimal import Decimal

from pydantic import Field

from wms.domain.enums import (ABCClassification, ProductCategory, ProductType,
                              StorageZone)
from wms.presentation.api.v1.schemas.common import CamelModel, DeletedFields


class ProductCreate(CamelModel):
    sku: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = None

    category: ProductCategory = ProductCategory.DRY
    product_type: ProductType = ProductType.COMMODITY
    default_storage_zone: StorageZone = StorageZone.PICKING
    abc_classification: ABCClassification | None = None

    unit_weight: Decimal = Field(Decimal("0"), ge=0)
    unit_volume: Decimal = Field(Decimal("0"), ge=0)
    unit_cost: Decimal | None = Field(None, ge=0)
    unit_price: Decimal | None = Field(None, ge=0)

    requires_lot_tracking: bool = False
    requires_serial_number: bool = False
    shelf_life_days: int | None = Field(None, ge=0)

    min_storage_temperature: Decimal | None = None
    max_storage_temperature: Decimal | None = None
    min_storage_humidity: Decimal | None = Field(None, ge=0, le=100)
    max_storage_humidity: Decimal | None = Field(None, ge=0, le=100)
    is_flammable: bool = False
    is_dangerous: bool = False
    is_pharmaceutical: bool = False


class ProductUpdate(CamelModel):
    """Partial update; the SKU is immutable"""

    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    category: ProductCategory | None = None
    product_type: ProductType | None = None
    default_storage_zone: StorageZone | None = None
    abc_classification: ABCClassification | None = None
    unit_weight: Decimal | None = Field(None, ge=0)
    unit_volume: Decimal | None = Field(None, ge=0)
    unit_cost: Decimal | None = Field(None, ge=0)
    unit_price: Decimal | None = Field(None, ge=0)
    requires_lot_tracking: bool | None = None
    requires_serial_number: bool | None = None
    shelf_life_days: int | None = Field(None, ge=0)
    is_active: bool | None = None
    min_storage_temperature: Decimal | None = None
    max_storage_temperature: Decimal | None = None
    min_storage_humidity: Decimal | None = Field(None, ge=0, le=100)
    max_storage_humidity: Decimal | None = Field(None, ge=0, le=100)
    is_flammable: bool | None = None
    is_dangerous: bool | None = None
    is_pharmaceutical: bool | None = None


class ProductResponse(DeletedFields):
    id: str
    tenant_id: str
    sku: str
    name: str
    description: str | None = None
    category: str
    product_type: str
    default_storage_zone: str
    abc_classification: str | None = None
    unit_weight: Decimal
    unit_volume: Decimal
    unit_cost: Decimal | None = None
    unit_price: Decimal | None = None
    requires_lot_tracking: bool
    requires_serial_number: bool
    shelf_life_days: int | None = None
    is_active: bool
    min_storage_temperature: Decimal | None = None
    max_storage_temperature: Decimal | None = None
    min_storage_humidity: Decimal | None = None
    max_storage_humidity: Decimal | None = None
    is_flammable: bool
    is_dangerous: bool
    is_pharmaceutical: bool


class SkuExistsResponse(CamelModel):
    sku: str
    exists: bool
