from datetime import datetime

from sqlalchemy import Boolean, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, validates

from wms.domain.exceptions import ValidationException
from wms.infrastructure.persistence.database import Base
from wms.infrastructure.persistence.models.mixins import (BaseEntityMixin,
                                                          CuidMixin,
                                                          active_rows_where,
                                                          require_text)
from wms.shared.utils import ensure_utc, utc_now


class Tenant(CuidMixin, BaseEntityMixin, Base):
    """
    Root tenant entity: the isolation boundary for users and master data.

    Note: Tenant does not have a tenant_id since it is the root of the hierarchy.
    """

    __tablename__ = "tenant"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), nullable=False)
    domain: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    contact_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    contact_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)

    subscription_start_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    subscription_end_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    max_users: Mapped[int] = mapped_column(Integer, default=10, nullable=False)

    __table_args__ = (
        Index("uq_tenant_slug_active", "slug", unique=True, **active_rows_where()),
        Index("uq_tenant_domain_active", "domain", unique=True, **active_rows_where()),
    )

    @validates("name", "slug")
    def _validate_required(self, key: str, value: str) -> str:
        return require_text(value, key)

    def update(
        self,
        actor: str | None,
        *,
        name: str,
        contact_email: str | None,
        contact_phone: str | None,
        address: str | None,
    ) -> None:
        self.name = name
        self.contact_email = contact_email
        self.contact_phone = contact_phone
        self.address = address
        self.touch(actor)

    def activate(self, actor: str | None) -> None:
        self.is_active = True
        self.touch(actor)

    def deactivate(self, actor: str | None) -> None:
        self.is_active = False
        self.touch(actor)

    @staticmethod
    def validate_subscription(
        start_date: datetime | None, end_date: datetime | None, max_users: int
    ) -> None:
        if (
            start_date is not None
            and end_date is not None
            and ensure_utc(end_date) < ensure_utc(start_date)
        ):
            raise ValidationException(
                "Subscription end date must be after start date", field="subscription_end_date"
            )
        if max_users < 1:
            raise ValidationException("max_users must be at least 1", field="max_users")

    def update_subscription(
        self, actor: str | None, start_date: datetime, end_date: datetime | None, max_users: int
    ) -> None:
        self.validate_subscription(start_date, end_date, max_users)
        self.subscription_start_date = start_date
        self.subscription_end_date = end_date
        self.max_users = max_users
        self.touch(actor)

    def is_subscription_active(self, now: datetime | None = None) -> bool:
        """Active tenant with no end date, or an end date still in the future"""
        if not self.is_active:
            return False
        end = ensure_utc(self.subscription_end_date)
        return end is None or end > (now or utc_now())

    def can_add_user(self, current_user_count: int) -> bool:
        return self.is_subscription_active() and current_user_count < self.max_users
