from datetime import time
from decimal import Decimal

from pydantic import Field

from wms.domain.enums import WarehouseStatus
from wms.presentation.api.v1.schemas.common import CamelModel, DeletedFields


class WarehouseCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    code: str = Field(..., min_length=1, max_length=50)
    description: str | None = None

    address: str | None = Field(None, max_length=500)
    city: str | None = Field(None, max_length=100)
    state: str | None = Field(None, max_length=50)
    postal_code: str | None = Field(None, max_length=20)
    country: str = Field("BRA", min_length=2, max_length=3)
    latitude: Decimal | None = Field(None, ge=-90, le=90)
    longitude: Decimal | None = Field(None, ge=-180, le=180)

    total_positions: int | None = Field(None, ge=0)
    total_weight_capacity: Decimal | None = Field(None, ge=0)

    opening_time: time | None = None
    closing_time: time | None = None
    max_workers: int | None = Field(None, ge=0)


class WarehouseUpdate(CamelModel):
    """Partial update; the code is immutable"""

    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    address: str | None = Field(None, max_length=500)
    city: str | None = Field(None, max_length=100)
    state: str | None = Field(None, max_length=50)
    postal_code: str | None = Field(None, max_length=20)
    country: str | None = Field(None, min_length=2, max_length=3)
    latitude: Decimal | None = Field(None, ge=-90, le=90)
    longitude: Decimal | None = Field(None, ge=-180, le=180)
    total_positions: int | None = Field(None, ge=0)
    total_weight_capacity: Decimal | None = Field(None, ge=0)
    opening_time: time | None = None
    closing_time: time | None = None
    max_workers: int | None = Field(None, ge=0)
    status: WarehouseStatus | None = None


class WarehouseResponse(DeletedFields):
    id: str
    tenant_id: str
    name: str
    code: str
    description: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None
    country: str
    latitude: Decimal | None = None
    longitude: Decimal | None = None
    total_positions: int | None = None
    total_weight_capacity: Decimal | None = None
    opening_time: time | None = None
    closing_time: time | None = None
    max_workers: int | None = None
    status: str
