from __future__ import annotations

from typing import TYPE_CHECKING

from wms.application.result import ErrorType, Result
from wms.infrastructure.persistence.models.product import Product
from wms.infrastructure.persistence.repositories.product_repo import \
    ProductRepository
from wms.shared.context import get_current_actor
from wms.shared.telemetry.logging import get_logger

if TYPE_CHECKING:
    from wms.presentation.api.v1.schemas.product import (ProductCreate,
                                                         ProductUpdate)

logger = get_logger(__name__)


class ProductService:
    """Product master data. SKUs are unique per tenant and never change."""

    def __init__(self, product_repo: ProductRepository) -> None:
        self.product_repo = product_repo

    async def list(self, tenant_id: str, skip: int = 0, limit: int = 100) -> Result[list[Product]]:
        return Result.ok(await self.product_repo.list_for_tenant(tenant_id, skip, limit))

    async def list_deleted(
        self, tenant_id: str, skip: int = 0, limit: int = 100
    ) -> Result[list[Product]]:
        return Result.ok(await self.product_repo.list_deleted_for_tenant(tenant_id, skip, limit))

    async def get(self, tenant_id: str, product_id: str) -> Result[Product]:
        product = await self.product_repo.get_for_tenant(product_id, tenant_id)
        if product is None:
            return Result.not_found("Product")
        return Result.ok(product)

    async def get_by_sku(self, tenant_id: str, sku: str) -> Result[Product]:
        if not sku.strip():
            return Result.fail("SKU is required")
        product = await self.product_repo.get_by_sku(tenant_id, sku)
        if product is None:
            return Result.fail("Product with this SKU not found", ErrorType.NOT_FOUND)
        return Result.ok(product)

    async def sku_exists(self, tenant_id: str, sku: str) -> Result[bool]:
        if not sku.strip():
            return Result.fail("SKU is required")
        return Result.ok(await self.product_repo.sku_exists(tenant_id, sku))

    async def create(self, tenant_id: str, data: "ProductCreate") -> Result[Product]:
        if await self.product_repo.sku_exists(tenant_id, data.sku):
            return Result.fail(f"Product with SKU '{data.sku}' already exists", ErrorType.DOMAIN)

        product = Product(
            tenant_id=tenant_id,
            sku=data.sku,
            name=data.name,
            description=data.description,
            category=data.category.value,
            product_type=data.product_type.value,
            default_storage_zone=data.default_storage_zone.value,
            abc_classification=(
                data.abc_classification.value if data.abc_classification is not None else None
            ),
            unit_weight=data.unit_weight,
            unit_volume=data.unit_volume,
            unit_cost=data.unit_cost,
            unit_price=data.unit_price,
            requires_lot_tracking=data.requires_lot_tracking,
            requires_serial_number=data.requires_serial_number,
            shelf_life_days=data.shelf_life_days,
            min_storage_temperature=data.min_storage_temperature,
            max_storage_temperature=data.max_storage_temperature,
            min_storage_humidity=data.min_storage_humidity,
            max_storage_humidity=data.max_storage_humidity,
            is_flammable=data.is_flammable,
            is_dangerous=data.is_dangerous,
            is_pharmaceutical=data.is_pharmaceutical,
            created_by=get_current_actor(),
        )
        product.validate_storage_conditions()

        created = await self.product_repo.create(product)
        logger.info("Created product %s (%s) in tenant %s", created.id, created.sku, tenant_id)
        return Result.ok(created)

    async def update(self, tenant_id: str, product_id: str, data: "ProductUpdate") -> Result[Product]:
        product = await self.product_repo.get_for_tenant(product_id, tenant_id)
        if product is None:
            return Result.not_found("Product")

        def pick(new, current):
            return new if new is not None else current

        actor = get_current_actor()
        # Raises before touching the row when a merged range is inverted
        product.update_info(
            actor,
            name=pick(data.name, product.name),
            description=pick(data.description, product.description),
            category=data.category.value if data.category is not None else product.category,
            product_type=(
                data.product_type.value if data.product_type is not None else product.product_type
            ),
            default_storage_zone=(
                data.default_storage_zone.value
                if data.default_storage_zone is not None
                else product.default_storage_zone
            ),
            abc_classification=(
                data.abc_classification.value
                if data.abc_classification is not None
                else product.abc_classification
            ),
            unit_weight=pick(data.unit_weight, product.unit_weight),
            unit_volume=pick(data.unit_volume, product.unit_volume),
            unit_cost=pick(data.unit_cost, product.unit_cost),
            unit_price=pick(data.unit_price, product.unit_price),
            requires_lot_tracking=pick(data.requires_lot_tracking, product.requires_lot_tracking),
            requires_serial_number=pick(
                data.requires_serial_number, product.requires_serial_number
            ),
            shelf_life_days=pick(data.shelf_life_days, product.shelf_life_days),
            min_storage_temperature=pick(
                data.min_storage_temperature, product.min_storage_temperature
            ),
            max_storage_temperature=pick(
                data.max_storage_temperature, product.max_storage_temperature
            ),
            min_storage_humidity=pick(data.min_storage_humidity, product.min_storage_humidity),
            max_storage_humidity=pick(data.max_storage_humidity, product.max_storage_humidity),
            is_flammable=pick(data.is_flammable, product.is_flammable),
            is_dangerous=pick(data.is_dangerous, product.is_dangerous),
            is_pharmaceutical=pick(data.is_pharmaceutical, product.is_pharmaceutical),
        )
        if data.is_active is True:
            product.activate(actor)
        elif data.is_active is False:
            product.deactivate(actor)

        return Result.ok(await self.product_repo.update(product))

    async def delete(self, tenant_id: str, product_id: str) -> Result[None]:
        product = await self.product_repo.get_for_tenant(product_id, tenant_id)
        if product is None:
            return Result.not_found("Product")

        await self.product_repo.soft_delete(product, get_current_actor())
        return Result.ok()

    async def restore(self, tenant_id: str, product_id: str) -> Result[Product]:
        product = await self.product_repo.get_for_tenant_including_deleted(product_id, tenant_id)
        if product is None:
            return Result.not_found("Product")
        if not product.is_deleted:
            return Result.fail("Product is not deleted", ErrorType.DOMAIN)
        if await self.product_repo.sku_exists(tenant_id, product.sku, exclude_id=product.id):
            return Result.fail(f"Product with SKU '{product.sku}' already exists", ErrorType.DOMAIN)

        return Result.ok(await self.product_repo.restore(product, get_current_actor()))
