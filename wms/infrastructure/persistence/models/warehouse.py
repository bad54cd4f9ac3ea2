from datetime import time
from decimal import Decimal

from sqlalchemy import CheckConstraint, Index, Integer, Numeric, String, Text, Time
from sqlalchemy.orm import Mapped, mapped_column, validates

from wms.domain.enums import WarehouseStatus
from wms.infrastructure.persistence.database import Base
from wms.infrastructure.persistence.models.mixins import (MultiTenantEntity,
                                                          active_rows_where,
                                                          require_text)


class Warehouse(MultiTenantEntity, Base):
    """
    Physical warehouse owned by a tenant.

    ``code`` is unique per tenant among non-deleted rows.
    """

    __tablename__ = "warehouse"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    code: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Location
    address: Mapped[str | None] = mapped_column(String(500), nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    state: Mapped[str | None] = mapped_column(String(50), nullable=True)
    postal_code: Mapped[str | None] = mapped_column(String(20), nullable=True)
    country: Mapped[str] = mapped_column(String(3), default="BRA", nullable=False)
    latitude: Mapped[Decimal | None] = mapped_column(Numeric(10, 7), nullable=True)
    longitude: Mapped[Decimal | None] = mapped_column(Numeric(10, 7), nullable=True)

    # Capacity
    total_positions: Mapped[int | None] = mapped_column(Integer, nullable=True)
    total_weight_capacity: Mapped[Decimal | None] = mapped_column(Numeric(18, 2), nullable=True)

    # Operation
    opening_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    closing_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    max_workers: Mapped[int | None] = mapped_column(Integer, nullable=True)

    status: Mapped[str] = mapped_column(
        String(20), default=WarehouseStatus.ACTIVE.value, nullable=False, index=True
    )

    __table_args__ = (
        Index(
            "uq_warehouse_tenant_code_active",
            "tenant_id",
            "code",
            unique=True,
            **active_rows_where(),
        ),
        CheckConstraint(
            f"status IN {tuple(WarehouseStatus.values())}", name="warehouse_status_check"
        ),
    )

    @validates("name", "code")
    def _validate_required(self, key: str, value: str) -> str:
        return require_text(value, key)

    def update_info(
        self,
        actor: str | None,
        *,
        name: str,
        description: str | None,
        address: str | None,
        city: str | None,
        state: str | None,
        postal_code: str | None,
        country: str | None,
        latitude: Decimal | None,
        longitude: Decimal | None,
        total_positions: int | None,
        total_weight_capacity: Decimal | None,
        opening_time: time | None,
        closing_time: time | None,
        max_workers: int | None,
    ) -> None:
        require_text(name, "name")
        self.name = name
        self.description = description
        self.address = address
        self.city = city
        self.state = state
        self.postal_code = postal_code
        self.country = country or "BRA"
        self.latitude = latitude
        self.longitude = longitude
        self.total_positions = total_positions
        self.total_weight_capacity = total_weight_capacity
        self.opening_time = opening_time
        self.closing_time = closing_time
        self.max_workers = max_workers
        self.touch(actor)

    def update_status(self, actor: str | None, status: WarehouseStatus) -> None:
        self.status = WarehouseStatus(status).value
        self.touch(actor)

    def activate(self, actor: str | None) -> None:
        self.update_status(actor, WarehouseStatus.ACTIVE)

    def deactivate(self, actor: str | None) -> None:
        self.update_status(actor, WarehouseStatus.INACTIVE)

    def set_maintenance(self, actor: str | None) -> None:
        self.update_status(actor, WarehouseStatus.MAINTENANCE)

    def is_operational(self) -> bool:
        return self.status == WarehouseStatus.ACTIVE.value

    def can_receive_goods(self) -> bool:
        return self.status in (WarehouseStatus.ACTIVE.value, WarehouseStatus.MAINTENANCE.value)
