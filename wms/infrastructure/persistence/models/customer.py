from sqlalchemy import CheckConstraint, Index, String
from sqlalchemy.orm import Mapped, mapped_column, validates

from wms.domain.enums import CustomerStatus, CustomerType
from wms.domain.exceptions import ValidationException
from wms.infrastructure.persistence.database import Base
from wms.infrastructure.persistence.models.mixins import (MultiTenantEntity,
                                                          active_rows_where,
                                                          require_text)


def _validate_customer_type(value: str) -> str:
    if value not in CustomerType.values():
        raise ValidationException("Customer type must be 'PJ' or 'PF'", field="customer_type")
    return value


class Customer(MultiTenantEntity, Base):
    """
    Customer of a tenant, either a company (PJ) or a person (PF).

    ``document_number`` (CNPJ/CPF) is optional; when present it is unique
    per tenant among non-deleted rows.
    """

    __tablename__ = "customer"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    customer_type: Mapped[str] = mapped_column(
        String(2), default=CustomerType.PJ.value, nullable=False
    )
    document_number: Mapped[str | None] = mapped_column(String(14), nullable=True)
    email: Mapped[str | None] = mapped_column(String(100), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), default=CustomerStatus.ACTIVE.value, nullable=False, index=True
    )

    __table_args__ = (
        Index(
            "uq_customer_tenant_document_active",
            "tenant_id",
            "document_number",
            unique=True,
            **active_rows_where(),
        ),
        CheckConstraint(
            f"customer_type IN {tuple(CustomerType.values())}", name="customer_type_check"
        ),
        CheckConstraint(
            f"status IN {tuple(CustomerStatus.values())}", name="customer_status_check"
        ),
    )

    @validates("name")
    def _validate_name(self, key: str, value: str) -> str:
        return require_text(value, key)

    @validates("customer_type")
    def _validate_type(self, key: str, value: str) -> str:
        return _validate_customer_type(value)

    def update_info(
        self,
        actor: str | None,
        *,
        name: str,
        customer_type: str,
        document_number: str | None,
        email: str | None,
        phone: str | None,
    ) -> None:
        require_text(name, "name")
        _validate_customer_type(customer_type)
        self.name = name
        self.customer_type = customer_type
        self.document_number = document_number
        self.email = email
        self.phone = phone
        self.touch(actor)

    def update_status(self, actor: str | None, status: CustomerStatus) -> None:
        self.status = CustomerStatus(status).value
        self.touch(actor)

    def activate(self, actor: str | None) -> None:
        self.update_status(actor, CustomerStatus.ACTIVE)

    def deactivate(self, actor: str | None) -> None:
        self.update_status(actor, CustomerStatus.INACTIVE)

    def block(self, actor: str | None) -> None:
        self.update_status(actor, CustomerStatus.BLOCKED)

    @property
    def is_active(self) -> bool:
        return self.status == CustomerStatus.ACTIVE.value
