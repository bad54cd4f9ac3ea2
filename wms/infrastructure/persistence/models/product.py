from decimal import Decimal

from sqlalchemy import Boolean, CheckConstraint, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, validates

from wms.domain.enums import (ABCClassification, ProductCategory, ProductType,
                              StorageZone)
from wms.domain.exceptions import ValidationException
from wms.infrastructure.persistence.database import Base
from wms.infrastructure.persistence.models.mixins import (MultiTenantEntity,
                                                          active_rows_where,
                                                          require_text)


class Product(MultiTenantEntity, Base):
    """
    Stock-keeping unit master record.

    ``sku`` is unique per tenant among non-deleted rows. Storage condition
    ranges must be ordered (min <= max) when both ends are given.
    """

    __tablename__ = "product"

    sku: Mapped[str] = mapped_column(String(50), nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    category: Mapped[str] = mapped_column(
        String(30), default=ProductCategory.DRY.value, nullable=False
    )
    product_type: Mapped[str] = mapped_column(
        String(30), default=ProductType.COMMODITY.value, nullable=False
    )
    default_storage_zone: Mapped[str] = mapped_column(
        String(30), default=StorageZone.PICKING.value, nullable=False
    )
    abc_classification: Mapped[str | None] = mapped_column(String(1), nullable=True)

    unit_weight: Mapped[Decimal] = mapped_column(Numeric(18, 4), default=0, nullable=False)
    unit_volume: Mapped[Decimal] = mapped_column(Numeric(18, 4), default=0, nullable=False)
    unit_cost: Mapped[Decimal | None] = mapped_column(Numeric(18, 2), nullable=True)
    unit_price: Mapped[Decimal | None] = mapped_column(Numeric(18, 2), nullable=True)

    requires_lot_tracking: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    requires_serial_number: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    shelf_life_days: Mapped[int | None] = mapped_column(Integer, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Storage conditions
    min_storage_temperature: Mapped[Decimal | None] = mapped_column(Numeric(6, 2), nullable=True)
    max_storage_temperature: Mapped[Decimal | None] = mapped_column(Numeric(6, 2), nullable=True)
    min_storage_humidity: Mapped[Decimal | None] = mapped_column(Numeric(5, 2), nullable=True)
    max_storage_humidity: Mapped[Decimal | None] = mapped_column(Numeric(5, 2), nullable=True)
    is_flammable: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_dangerous: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_pharmaceutical: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    __table_args__ = (
        Index(
            "uq_product_tenant_sku_active",
            "tenant_id",
            "sku",
            unique=True,
            **active_rows_where(),
        ),
        CheckConstraint(
            f"category IN {tuple(ProductCategory.values())}", name="product_category_check"
        ),
        CheckConstraint(
            f"product_type IN {tuple(ProductType.values())}", name="product_type_check"
        ),
        CheckConstraint(
            f"default_storage_zone IN {tuple(StorageZone.values())}",
            name="product_storage_zone_check",
        ),
    )

    @validates("sku", "name")
    def _validate_required(self, key: str, value: str) -> str:
        return require_text(value, key)

    @validates("category")
    def _validate_category(self, key: str, value: str) -> str:
        return ProductCategory(value).value

    @validates("product_type")
    def _validate_product_type(self, key: str, value: str) -> str:
        return ProductType(value).value

    @validates("default_storage_zone")
    def _validate_storage_zone(self, key: str, value: str) -> str:
        return StorageZone(value).value

    @validates("abc_classification")
    def _validate_abc(self, key: str, value: str | None) -> str | None:
        return ABCClassification(value).value if value is not None else None

    @staticmethod
    def check_storage_ranges(
        min_temperature: Decimal | None,
        max_temperature: Decimal | None,
        min_humidity: Decimal | None,
        max_humidity: Decimal | None,
    ) -> None:
        """Raise when a min/max storage range is inverted"""
        if (
            min_temperature is not None
            and max_temperature is not None
            and min_temperature > max_temperature
        ):
            raise ValidationException(
                "Minimum storage temperature cannot exceed maximum",
                field="min_storage_temperature",
            )
        if min_humidity is not None and max_humidity is not None and min_humidity > max_humidity:
            raise ValidationException(
                "Minimum storage humidity cannot exceed maximum",
                field="min_storage_humidity",
            )

    def validate_storage_conditions(self) -> None:
        self.check_storage_ranges(
            self.min_storage_temperature,
            self.max_storage_temperature,
            self.min_storage_humidity,
            self.max_storage_humidity,
        )

    def update_info(
        self,
        actor: str | None,
        *,
        name: str,
        description: str | None,
        category: str,
        product_type: str,
        default_storage_zone: str,
        abc_classification: str | None,
        unit_weight: Decimal,
        unit_volume: Decimal,
        unit_cost: Decimal | None,
        unit_price: Decimal | None,
        requires_lot_tracking: bool,
        requires_serial_number: bool,
        shelf_life_days: int | None,
        min_storage_temperature: Decimal | None,
        max_storage_temperature: Decimal | None,
        min_storage_humidity: Decimal | None,
        max_storage_humidity: Decimal | None,
        is_flammable: bool,
        is_dangerous: bool,
        is_pharmaceutical: bool,
    ) -> None:
        """Replace the editable fields; nothing is changed when a range is inverted"""
        require_text(name, "name")
        self.check_storage_ranges(
            min_storage_temperature,
            max_storage_temperature,
            min_storage_humidity,
            max_storage_humidity,
        )
        self.name = name
        self.description = description
        self.category = category
        self.product_type = product_type
        self.default_storage_zone = default_storage_zone
        self.abc_classification = abc_classification
        self.unit_weight = unit_weight
        self.unit_volume = unit_volume
        self.unit_cost = unit_cost
        self.unit_price = unit_price
        self.requires_lot_tracking = requires_lot_tracking
        self.requires_serial_number = requires_serial_number
        self.shelf_life_days = shelf_life_days
        self.min_storage_temperature = min_storage_temperature
        self.max_storage_temperature = max_storage_temperature
        self.min_storage_humidity = min_storage_humidity
        self.max_storage_humidity = max_storage_humidity
        self.is_flammable = is_flammable
        self.is_dangerous = is_dangerous
        self.is_pharmaceutical = is_pharmaceutical
        self.touch(actor)

    def activate(self, actor: str | None) -> None:
        self.is_active = True
        self.touch(actor)

    def deactivate(self, actor: str | None) -> None:
        self.is_active = False
        self.touch(actor)
