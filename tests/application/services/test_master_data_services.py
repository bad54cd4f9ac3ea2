"""Uniqueness and soft-delete rules of the tenant master data services"""

from decimal import Decimal

import pytest

from wms.application.result import ErrorType
from wms.application.services.company_service import CompanyService
from wms.application.services.customer_service import (DUPLICATE_DOCUMENT,
                                                       CustomerService)
from wms.application.services.product_service import ProductService
from wms.application.services.warehouse_service import WarehouseService
from wms.domain.enums import CustomerType
from wms.domain.exceptions import ValidationException
from wms.infrastructure.persistence.repositories import (CompanyRepository,
                                                         CustomerRepository,
                                                         ProductRepository,
                                                         WarehouseRepository)
from wms.presentation.api.v1.schemas.company import CompanyCreate, CompanyUpdate
from wms.presentation.api.v1.schemas.customer import (CustomerCreate,
                                                      CustomerUpdate)
from wms.presentation.api.v1.schemas.product import ProductCreate, ProductUpdate
from wms.presentation.api.v1.schemas.warehouse import (WarehouseCreate,
                                                       WarehouseUpdate)


def company_payload(cnpj: str = "12345678000195") -> CompanyCreate:
    return CompanyCreate(
        legal_name="Acme Logistica LTDA",
        trade_name="Acme",
        cnpj=cnpj,
        email="contato@acme.com.br",
        postal_code="01001000",
        street="Praca da Se",
        number="100",
        district="Se",
        city="Sao Paulo",
        state="SP",
        legal_rep_name="Maria Silva",
        legal_rep_cpf="12345678909",
        legal_rep_email="maria@acme.com.br",
    )


@pytest.fixture
def tenant_id(seeded, actor) -> str:
    actor(tenant_id=seeded.tenant.id)
    return seeded.tenant.id


class TestWarehouseService:
    @pytest.fixture
    def service(self, test_db) -> WarehouseService:
        return WarehouseService(WarehouseRepository(test_db))

    @pytest.mark.asyncio
    async def test_duplicate_code_is_rejected(self, service, tenant_id):
        assert (await service.create(tenant_id, WarehouseCreate(name="Main", code="WH-01"))).success

        result = await service.create(tenant_id, WarehouseCreate(name="Copy", code="WH-01"))

        assert result.error == "Warehouse with code 'WH-01' already exists"
        assert result.error_type == ErrorType.DOMAIN

    @pytest.mark.asyncio
    async def test_code_can_be_reused_after_soft_delete(self, service, tenant_id):
        """
        GIVEN warehouse WH-01
        WHEN it is soft-deleted
        THEN a new WH-01 can be created and the old one can no longer be restored.
        """
        original = (await service.create(tenant_id, WarehouseCreate(name="Main", code="WH-01"))).value
        assert (await service.delete(tenant_id, original.id)).success

        listed = await service.list(tenant_id)
        assert original.id not in [w.id for w in listed.value]
        deleted = await service.list_deleted(tenant_id)
        assert [w.id for w in deleted.value] == [original.id]

        replacement = await service.create(tenant_id, WarehouseCreate(name="New", code="WH-01"))
        assert replacement.success

        restored = await service.restore(tenant_id, original.id)
        assert restored.error == "Warehouse with code 'WH-01' already exists"

    @pytest.mark.asyncio
    async def test_restore(self, service, tenant_id):
        created = (await service.create(tenant_id, WarehouseCreate(name="Main", code="WH-02"))).value
        await service.delete(tenant_id, created.id)

        restored = await service.restore(tenant_id, created.id)

        assert restored.success
        assert not restored.value.is_deleted
        assert restored.value.deleted_at is None
        assert (await service.get(tenant_id, created.id)).success

    @pytest.mark.asyncio
    async def test_restore_of_live_warehouse(self, service, tenant_id):
        created = (await service.create(tenant_id, WarehouseCreate(name="Main", code="WH-03"))).value

        result = await service.restore(tenant_id, created.id)

        assert result.error == "Warehouse is not deleted"

    @pytest.mark.asyncio
    async def test_other_tenant_cannot_see_warehouse(self, service, tenant_id, other_tenant):
        created = (await service.create(tenant_id, WarehouseCreate(name="Main", code="WH-01"))).value

        assert (await service.get(other_tenant.id, created.id)).error_type == ErrorType.NOT_FOUND
        assert (await service.delete(other_tenant.id, created.id)).error_type == ErrorType.NOT_FOUND
        assert (await service.create(other_tenant.id, WarehouseCreate(name="B", code="WH-01"))).success

    @pytest.mark.asyncio
    async def test_partial_update_keeps_other_fields(self, service, tenant_id):
        created = (
            await service.create(
                tenant_id, WarehouseCreate(name="Main", code="WH-01", city="Campinas", max_workers=12)
            )
        ).value

        result = await service.update(tenant_id, created.id, WarehouseUpdate(name="Main DC"))

        assert result.value.name == "Main DC"
        assert result.value.city == "Campinas"
        assert result.value.max_workers == 12
        assert result.value.updated_by == "tester"


class TestCustomerService:
    @pytest.fixture
    def service(self, test_db) -> CustomerService:
        return CustomerService(CustomerRepository(test_db))

    @pytest.mark.asyncio
    async def test_duplicate_document_in_tenant(self, service, tenant_id):
        data = CustomerCreate(
            name="Loja A", customer_type=CustomerType.PJ, document_number="11222333000181"
        )
        assert (await service.create(tenant_id, data)).success

        result = await service.create(
            tenant_id,
            CustomerCreate(name="Loja B", customer_type=CustomerType.PJ, document_number="11222333000181"),
        )

        assert result.error == DUPLICATE_DOCUMENT
        assert result.error_type == ErrorType.DOMAIN

    @pytest.mark.asyncio
    async def test_customers_without_document_never_collide(self, service, tenant_id):
        first = await service.create(tenant_id, CustomerCreate(name="A", customer_type=CustomerType.PF))
        second = await service.create(tenant_id, CustomerCreate(name="B", customer_type=CustomerType.PF))

        assert first.success and second.success

    @pytest.mark.asyncio
    async def test_update_to_taken_document(self, service, tenant_id):
        await service.create(
            tenant_id, CustomerCreate(name="A", customer_type=CustomerType.PF, document_number="39053344705")
        )
        other = (
            await service.create(tenant_id, CustomerCreate(name="B", customer_type=CustomerType.PF))
        ).value

        result = await service.update(
            tenant_id, other.id, CustomerUpdate(document_number="39053344705")
        )

        assert result.error == DUPLICATE_DOCUMENT

    @pytest.mark.asyncio
    async def test_document_is_freed_by_soft_delete(self, service, tenant_id):
        data = CustomerCreate(name="A", customer_type=CustomerType.PF, document_number="39053344705")
        created = (await service.create(tenant_id, data)).value
        await service.delete(tenant_id, created.id)

        assert (await service.create(tenant_id, data)).success


class TestProductService:
    @pytest.fixture
    def service(self, test_db) -> ProductService:
        return ProductService(ProductRepository(test_db))

    @pytest.mark.asyncio
    async def test_sku_lookup_and_exists(self, service, tenant_id):
        created = (await service.create(tenant_id, ProductCreate(sku="SKU-1", name="Widget"))).value

        assert (await service.get_by_sku(tenant_id, "SKU-1")).value.id == created.id
        assert (await service.sku_exists(tenant_id, "SKU-1")).value is True
        assert (await service.sku_exists(tenant_id, "SKU-2")).value is False
        assert (await service.get_by_sku(tenant_id, "SKU-2")).error_type == ErrorType.NOT_FOUND

    @pytest.mark.asyncio
    async def test_blank_sku_lookup_is_a_validation_error(self, service, tenant_id):
        result = await service.get_by_sku(tenant_id, "  ")

        assert result.error == "SKU is required"
        assert result.error_type == ErrorType.VALIDATION

    @pytest.mark.asyncio
    async def test_duplicate_sku_and_reuse_after_delete(self, service, tenant_id):
        created = (await service.create(tenant_id, ProductCreate(sku="SKU-1", name="Widget"))).value

        duplicate = await service.create(tenant_id, ProductCreate(sku="SKU-1", name="Other"))
        assert duplicate.error == "Product with SKU 'SKU-1' already exists"

        await service.delete(tenant_id, created.id)
        assert (await service.create(tenant_id, ProductCreate(sku="SKU-1", name="Other"))).success

    @pytest.mark.asyncio
    async def test_inverted_temperature_range(self, service, tenant_id):
        data = ProductCreate(
            sku="COLD-1",
            name="Vaccine",
            min_storage_temperature=Decimal("8"),
            max_storage_temperature=Decimal("2"),
        )

        with pytest.raises(ValidationException):
            await service.create(tenant_id, data)

    @pytest.mark.asyncio
    async def test_update_validates_merged_range(self, service, tenant_id):
        created = (
            await service.create(
                tenant_id,
                ProductCreate(
                    sku="COLD-1",
                    name="Vaccine",
                    min_storage_temperature=Decimal("2"),
                    max_storage_temperature=Decimal("8"),
                ),
            )
        ).value

        with pytest.raises(ValidationException) as exc_info:
            await service.update(
                tenant_id,
                created.id,
                ProductUpdate(name="Renamed", min_storage_temperature=Decimal("10")),
            )

        assert exc_info.value.field == "min_storage_temperature"
        assert created.name == "Vaccine"
        assert created.min_storage_temperature == Decimal("2")

    @pytest.mark.asyncio
    async def test_update_merges_partial_changes(self, service, tenant_id):
        created = (
            await service.create(
                tenant_id,
                ProductCreate(sku="COLD-2", name="Serum", max_storage_temperature=Decimal("8")),
            )
        ).value

        result = await service.update(
            tenant_id, created.id, ProductUpdate(description="Keep cold", is_active=False)
        )

        assert result.success
        assert result.value.name == "Serum"
        assert result.value.description == "Keep cold"
        assert result.value.max_storage_temperature == Decimal("8")
        assert not result.value.is_active


class TestCompanyService:
    @pytest.fixture
    def service(self, test_db) -> CompanyService:
        return CompanyService(CompanyRepository(test_db))

    @pytest.mark.asyncio
    async def test_one_company_per_tenant(self, service, tenant_id):
        assert (await service.create(tenant_id, company_payload())).success

        result = await service.create(tenant_id, company_payload("98765432000198"))

        assert result.error == "A company is already registered for this tenant"

    @pytest.mark.asyncio
    async def test_cnpj_is_unique_across_tenants(self, service, tenant_id, other_tenant):
        await service.create(tenant_id, company_payload())

        result = await service.create(other_tenant.id, company_payload())

        assert result.error == "CNPJ already registered"

    @pytest.mark.asyncio
    async def test_cnpj_is_reusable_after_soft_delete(self, service, tenant_id, other_tenant):
        await service.create(tenant_id, company_payload())
        assert (await service.delete(tenant_id)).success
        assert (await service.get(tenant_id)).error_type == ErrorType.NOT_FOUND

        assert (await service.create(other_tenant.id, company_payload())).success

    @pytest.mark.asyncio
    async def test_update(self, service, tenant_id):
        await service.create(tenant_id, company_payload())

        result = await service.update(tenant_id, CompanyUpdate(trade_name="Acme Express"))

        assert result.value.trade_name == "Acme Express"
        assert result.value.legal_name == "Acme Logistica LTDA"
