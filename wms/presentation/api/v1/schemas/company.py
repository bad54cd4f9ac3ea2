from datetime import date
from decimal import Decimal

from pydantic import EmailStr, Field

from wms.presentation.api.v1.schemas.common import AuditFields, CamelModel


class CompanyCreate(CamelModel):
    """Registration data for the tenant's company"""

    legal_name: str = Field(..., min_length=1, max_length=200)
    trade_name: str | None = Field(None, max_length=200)
    cnpj: str = Field(..., min_length=14, max_length=18)
    state_registration: str | None = Field(None, max_length=30)
    municipal_registration: str | None = Field(None, max_length=30)

    email: EmailStr
    phone: str | None = Field(None, max_length=20)
    mobile: str | None = Field(None, max_length=20)
    website: str | None = Field(None, max_length=255)

    postal_code: str = Field(..., min_length=1, max_length=10)
    street: str = Field(..., min_length=1, max_length=200)
    number: str = Field(..., min_length=1, max_length=20)
    complement: str | None = Field(None, max_length=100)
    district: str = Field(..., min_length=1, max_length=100)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=2, max_length=2)

    opening_date: date | None = None
    share_capital: Decimal | None = Field(None, ge=0)
    main_activity: str | None = Field(None, max_length=255)
    tax_regime: str | None = Field(None, max_length=50)

    legal_rep_name: str = Field(..., min_length=1, max_length=200)
    legal_rep_cpf: str = Field(..., min_length=11, max_length=14)
    legal_rep_position: str | None = Field(None, max_length=100)
    legal_rep_email: EmailStr
    legal_rep_phone: str | None = Field(None, max_length=20)


class CompanyUpdate(CamelModel):
    """Partial update. The CNPJ cannot be changed."""

    legal_name: str | None = Field(None, min_length=1, max_length=200)
    trade_name: str | None = Field(None, max_length=200)
    state_registration: str | None = Field(None, max_length=30)
    municipal_registration: str | None = Field(None, max_length=30)

    email: EmailStr | None = None
    phone: str | None = Field(None, max_length=20)
    mobile: str | None = Field(None, max_length=20)
    website: str | None = Field(None, max_length=255)

    postal_code: str | None = Field(None, min_length=1, max_length=10)
    street: str | None = Field(None, min_length=1, max_length=200)
    number: str | None = Field(None, min_length=1, max_length=20)
    complement: str | None = Field(None, max_length=100)
    district: str | None = Field(None, min_length=1, max_length=100)
    city: str | None = Field(None, min_length=1, max_length=100)
    state: str | None = Field(None, min_length=2, max_length=2)

    opening_date: date | None = None
    share_capital: Decimal | None = Field(None, ge=0)
    main_activity: str | None = Field(None, max_length=255)
    tax_regime: str | None = Field(None, max_length=50)

    legal_rep_name: str | None = Field(None, min_length=1, max_length=200)
    legal_rep_cpf: str | None = Field(None, min_length=11, max_length=14)
    legal_rep_position: str | None = Field(None, max_length=100)
    legal_rep_email: EmailStr | None = None
    legal_rep_phone: str | None = Field(None, max_length=20)


class CompanyResponse(AuditFields):
    id: str
    tenant_id: str
    legal_name: str
    trade_name: str | None = None
    cnpj: str
    state_registration: str | None = None
    municipal_registration: str | None = None
    email: str
    phone: str | None = None
    mobile: str | None = None
    website: str | None = None
    postal_code: str
    street: str
    number: str
    complement: str | None = None
    district: str
    city: str
    state: str
    opening_date: date | None = None
    share_capital: Decimal | None = None
    main_activity: str | None = None
    tax_regime: str | None = None
    legal_rep_name: str
    legal_rep_cpf: str
    legal_rep_position: str | None = None
    legal_rep_email: str
    legal_rep_phone: str | None = None
