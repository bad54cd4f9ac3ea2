from __future__ import annotations

from typing import TYPE_CHECKING

from wms.application.result import ErrorType, Result
from wms.infrastructure.persistence.models.customer import Customer
from wms.infrastructure.persistence.repositories.customer_repo import \
    CustomerRepository
from wms.shared.context import get_current_actor
from wms.shared.telemetry.logging import get_logger

if TYPE_CHECKING:
    from wms.presentation.api.v1.schemas.customer import (CustomerCreate,
                                                          CustomerUpdate)

logger = get_logger(__name__)

DUPLICATE_DOCUMENT = "A customer with this document number already exists"


class CustomerService:
    def __init__(self, customer_repo: CustomerRepository) -> None:
        self.customer_repo = customer_repo

    async def list(self, tenant_id: str, skip: int = 0, limit: int = 100) -> Result[list[Customer]]:
        return Result.ok(await self.customer_repo.list_for_tenant(tenant_id, skip, limit))

    async def list_deleted(
        self, tenant_id: str, skip: int = 0, limit: int = 100
    ) -> Result[list[Customer]]:
        return Result.ok(await self.customer_repo.list_deleted_for_tenant(tenant_id, skip, limit))

    async def get(self, tenant_id: str, customer_id: str) -> Result[Customer]:
        customer = await self.customer_repo.get_for_tenant(customer_id, tenant_id)
        if customer is None:
            return Result.not_found("Customer")
        return Result.ok(customer)

    async def create(self, tenant_id: str, data: "CustomerCreate") -> Result[Customer]:
        if data.document_number and await self.customer_repo.document_exists(
            tenant_id, data.document_number
        ):
            return Result.fail(DUPLICATE_DOCUMENT, ErrorType.DOMAIN)

        customer = Customer(
            tenant_id=tenant_id,
            name=data.name,
            customer_type=data.customer_type.value,
            document_number=data.document_number,
            email=data.email,
            phone=data.phone,
            created_by=get_current_actor(),
        )
        created = await self.customer_repo.create(customer)
        logger.info("Created customer %s in tenant %s", created.id, tenant_id)
        return Result.ok(created)

    async def update(
        self, tenant_id: str, customer_id: str, data: "CustomerUpdate"
    ) -> Result[Customer]:
        customer = await self.customer_repo.get_for_tenant(customer_id, tenant_id)
        if customer is None:
            return Result.not_found("Customer")

        document_number = (
            data.document_number if data.document_number is not None else customer.document_number
        )
        if (
            document_number
            and document_number != customer.document_number
            and await self.customer_repo.document_exists(
                tenant_id, document_number, exclude_id=customer.id
            )
        ):
            return Result.fail(DUPLICATE_DOCUMENT, ErrorType.DOMAIN)

        actor = get_current_actor()
        customer.update_info(
            actor,
            name=data.name if data.name is not None else customer.name,
            customer_type=(
                data.customer_type.value
                if data.customer_type is not None
                else customer.customer_type
            ),
            document_number=document_number,
            email=data.email if data.email is not None else customer.email,
            phone=data.phone if data.phone is not None else customer.phone,
        )
        if data.status is not None:
            customer.update_status(actor, data.status)

        return Result.ok(await self.customer_repo.update(customer))

    async def delete(self, tenant_id: str, customer_id: str) -> Result[None]:
        customer = await self.customer_repo.get_for_tenant(customer_id, tenant_id)
        if customer is None:
            return Result.not_found("Customer")

        await self.customer_repo.soft_delete(customer, get_current_actor())
        return Result.ok()

    async def restore(self, tenant_id: str, customer_id: str) -> Result[Customer]:
        customer = await self.customer_repo.get_for_tenant_including_deleted(customer_id, tenant_id)
        if customer is None:
            return Result.not_found("Customer")
        if not customer.is_deleted:
            return Result.fail("Customer is not deleted", ErrorType.DOMAIN)
        if customer.document_number and await self.customer_repo.document_exists(
            tenant_id, customer.document_number, exclude_id=customer.id
        ):
            return Result.fail(DUPLICATE_DOCUMENT, ErrorType.DOMAIN)

        return Result.ok(await self.customer_repo.restore(customer, get_current_actor()))
