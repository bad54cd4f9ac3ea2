from __future__ import annotations

from typing import TYPE_CHECKING

from wms.application.result import ErrorType, Result
from wms.infrastructure.persistence.models.warehouse import Warehouse
from wms.infrastructure.persistence.repositories.warehouse_repo import \
    WarehouseRepository
from wms.shared.context import get_current_actor
from wms.shared.telemetry.logging import get_logger

if TYPE_CHECKING:
    from wms.presentation.api.v1.schemas.warehouse import (WarehouseCreate,
                                                           WarehouseUpdate)

logger = get_logger(__name__)


class WarehouseService:
    """Warehouse master data, scoped to one tenant per call"""

    def __init__(self, warehouse_repo: WarehouseRepository) -> None:
        self.warehouse_repo = warehouse_repo

    async def list(self, tenant_id: str, skip: int = 0, limit: int = 100) -> Result[list[Warehouse]]:
        return Result.ok(await self.warehouse_repo.list_for_tenant(tenant_id, skip, limit))

    async def list_deleted(
        self, tenant_id: str, skip: int = 0, limit: int = 100
    ) -> Result[list[Warehouse]]:
        return Result.ok(await self.warehouse_repo.list_deleted_for_tenant(tenant_id, skip, limit))

    async def get(self, tenant_id: str, warehouse_id: str) -> Result[Warehouse]:
        warehouse = await self.warehouse_repo.get_for_tenant(warehouse_id, tenant_id)
        if warehouse is None:
            return Result.not_found("Warehouse")
        return Result.ok(warehouse)

    async def create(self, tenant_id: str, data: "WarehouseCreate") -> Result[Warehouse]:
        """Codes are unique per tenant among non-deleted warehouses"""
        if await self.warehouse_repo.code_exists(tenant_id, data.code):
            return Result.fail(
                f"Warehouse with code '{data.code}' already exists", ErrorType.DOMAIN
            )

        actor = get_current_actor()
        warehouse = Warehouse(
            tenant_id=tenant_id,
            code=data.code,
            name=data.name,
            description=data.description,
            address=data.address,
            city=data.city,
            state=data.state,
            postal_code=data.postal_code,
            country=data.country,
            latitude=data.latitude,
            longitude=data.longitude,
            total_positions=data.total_positions,
            total_weight_capacity=data.total_weight_capacity,
            opening_time=data.opening_time,
            closing_time=data.closing_time,
            max_workers=data.max_workers,
            created_by=actor,
        )
        created = await self.warehouse_repo.create(warehouse)
        logger.info("Created warehouse %s (%s) in tenant %s", created.id, created.code, tenant_id)
        return Result.ok(created)

    async def update(
        self, tenant_id: str, warehouse_id: str, data: "WarehouseUpdate"
    ) -> Result[Warehouse]:
        warehouse = await self.warehouse_repo.get_for_tenant(warehouse_id, tenant_id)
        if warehouse is None:
            return Result.not_found("Warehouse")

        actor = get_current_actor()
        warehouse.update_info(
            actor,
            name=data.name if data.name is not None else warehouse.name,
            description=data.description if data.description is not None else warehouse.description,
            address=data.address if data.address is not None else warehouse.address,
            city=data.city if data.city is not None else warehouse.city,
            state=data.state if data.state is not None else warehouse.state,
            postal_code=data.postal_code if data.postal_code is not None else warehouse.postal_code,
            country=data.country if data.country is not None else warehouse.country,
            latitude=data.latitude if data.latitude is not None else warehouse.latitude,
            longitude=data.longitude if data.longitude is not None else warehouse.longitude,
            total_positions=(
                data.total_positions
                if data.total_positions is not None
                else warehouse.total_positions
            ),
            total_weight_capacity=(
                data.total_weight_capacity
                if data.total_weight_capacity is not None
                else warehouse.total_weight_capacity
            ),
            opening_time=(
                data.opening_time if data.opening_time is not None else warehouse.opening_time
            ),
            closing_time=(
                data.closing_time if data.closing_time is not None else warehouse.closing_time
            ),
            max_workers=data.max_workers if data.max_workers is not None else warehouse.max_workers,
        )
        if data.status is not None:
            warehouse.update_status(actor, data.status)

        return Result.ok(await self.warehouse_repo.update(warehouse))

    async def delete(self, tenant_id: str, warehouse_id: str) -> Result[None]:
        warehouse = await self.warehouse_repo.get_for_tenant(warehouse_id, tenant_id)
        if warehouse is None:
            return Result.not_found("Warehouse")

        await self.warehouse_repo.soft_delete(warehouse, get_current_actor())
        logger.info("Deleted warehouse %s in tenant %s", warehouse_id, tenant_id)
        return Result.ok()

    async def restore(self, tenant_id: str, warehouse_id: str) -> Result[Warehouse]:
        """Undo a soft delete unless the code has been reused meanwhile"""
        warehouse = await self.warehouse_repo.get_for_tenant_including_deleted(
            warehouse_id, tenant_id
        )
        if warehouse is None:
            return Result.not_found("Warehouse")
        if not warehouse.is_deleted:
            return Result.fail("Warehouse is not deleted", ErrorType.DOMAIN)
        if await self.warehouse_repo.code_exists(tenant_id, warehouse.code, exclude_id=warehouse.id):
            return Result.fail(
                f"Warehouse with code '{warehouse.code}' already exists", ErrorType.DOMAIN
            )

        return Result.ok(await self.warehouse_repo.restore(warehouse, get_current_actor()))
