from pydantic import EmailStr, Field

from wms.domain.enums import CustomerStatus, CustomerType
from wms.presentation.api.v1.schemas.common import CamelModel, DeletedFields


class CustomerCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    customer_type: CustomerType = Field(..., description="'PJ' (company) or 'PF' (person)")
    document_number: str | None = Field(None, max_length=14, description="CNPJ or CPF digits")
    email: EmailStr | None = None
    phone: str | None = Field(None, max_length=20)


class CustomerUpdate(CamelModel):
    name: str | None = Field(None, min_length=1, max_length=200)
    customer_type: CustomerType | None = None
    document_number: str | None = Field(None, max_length=14)
    email: EmailStr | None = None
    phone: str | None = Field(None, max_length=20)
    status: CustomerStatus | None = None


class CustomerResponse(DeletedFields):
    id: str
    tenant_id: str
    name: str
    customer_type: str
    document_number: str | None = None
    email: str | None = None
    phone: str | None = None
    status: str
