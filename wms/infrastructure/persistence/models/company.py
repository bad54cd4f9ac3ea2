from datetime import date
from decimal import Decimal

from sqlalchemy import Date, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, validates

from wms.infrastructure.persistence.database import Base
from wms.infrastructure.persistence.models.mixins import (MultiTenantEntity,
                                                          active_rows_where,
                                                          require_text)


class Company(MultiTenantEntity, Base):
    """
    Legal entity operating a tenant. At most one live company per tenant.

    The CNPJ is unique across all tenants among non-deleted rows, so a
    soft-deleted company does not block the number from being registered again.
    """

    __tablename__ = "company"

    # Registration
    legal_name: Mapped[str] = mapped_column(String(200), nullable=False)
    trade_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    cnpj: Mapped[str] = mapped_column(String(18), nullable=False, index=True)
    state_registration: Mapped[str | None] = mapped_column(String(30), nullable=True)
    municipal_registration: Mapped[str | None] = mapped_column(String(30), nullable=True)

    # Contact
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    mobile: Mapped[str | None] = mapped_column(String(20), nullable=True)
    website: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Address
    postal_code: Mapped[str] = mapped_column(String(10), nullable=False)
    street: Mapped[str] = mapped_column(String(200), nullable=False)
    number: Mapped[str] = mapped_column(String(20), nullable=False)
    complement: Mapped[str | None] = mapped_column(String(100), nullable=True)
    district: Mapped[str] = mapped_column(String(100), nullable=False)
    city: Mapped[str] = mapped_column(String(100), nullable=False)
    state: Mapped[str] = mapped_column(String(2), nullable=False)

    # Additional information
    opening_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    share_capital: Mapped[Decimal | None] = mapped_column(Numeric(18, 2), nullable=True)
    main_activity: Mapped[str | None] = mapped_column(String(255), nullable=True)
    tax_regime: Mapped[str | None] = mapped_column(String(50), nullable=True)

    # Legal representative
    legal_rep_name: Mapped[str] = mapped_column(String(200), nullable=False)
    legal_rep_cpf: Mapped[str] = mapped_column(String(14), nullable=False)
    legal_rep_position: Mapped[str | None] = mapped_column(String(100), nullable=True)
    legal_rep_email: Mapped[str] = mapped_column(String(255), nullable=False)
    legal_rep_phone: Mapped[str | None] = mapped_column(String(20), nullable=True)

    __table_args__ = (
        Index("uq_company_cnpj_active", "cnpj", unique=True, **active_rows_where()),
        Index("uq_company_tenant_active", "tenant_id", unique=True, **active_rows_where()),
    )

    @validates("legal_name", "cnpj", "email", "legal_rep_name", "legal_rep_cpf", "legal_rep_email")
    def _validate_required(self, key: str, value: str) -> str:
        return require_text(value, key)

    def update_info(
        self,
        actor: str | None,
        *,
        legal_name: str,
        trade_name: str | None,
        state_registration: str | None,
        municipal_registration: str | None,
        email: str,
        phone: str | None,
        mobile: str | None,
        website: str | None,
        postal_code: str,
        street: str,
        number: str,
        complement: str | None,
        district: str,
        city: str,
        state: str,
        opening_date: date | None,
        share_capital: Decimal | None,
        main_activity: str | None,
        tax_regime: str | None,
        legal_rep_name: str,
        legal_rep_cpf: str,
        legal_rep_position: str | None,
        legal_rep_email: str,
        legal_rep_phone: str | None,
    ) -> None:
        """Replace every mutable field. The CNPJ is fixed at creation."""
        # Validate before assigning so a bad value leaves the entity untouched
        for field, value in (
            ("legal_name", legal_name),
            ("email", email),
            ("legal_rep_name", legal_rep_name),
            ("legal_rep_cpf", legal_rep_cpf),
            ("legal_rep_email", legal_rep_email),
        ):
            require_text(value, field)

        self.legal_name = legal_name
        self.trade_name = trade_name
        self.state_registration = state_registration
        self.municipal_registration = municipal_registration
        self.email = email
        self.phone = phone
        self.mobile = mobile
        self.website = website
        self.postal_code = postal_code
        self.street = street
        self.number = number
        self.complement = complement
        self.district = district
        self.city = city
        self.state = state
        self.opening_date = opening_date
        self.share_capital = share_capital
        self.main_activity = main_activity
        self.tax_regime = tax_regime
        self.legal_rep_name = legal_rep_name
        self.legal_rep_cpf = legal_rep_cpf
        self.legal_rep_position = legal_rep_position
        self.legal_rep_email = legal_rep_email
        self.legal_rep_phone = legal_rep_phone
        self.touch(actor)
