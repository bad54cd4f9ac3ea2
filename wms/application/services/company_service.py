"""
Company service. Each tenant has at most one company record, addressed
through the tenant rather than by id.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from wms.application.result import ErrorType, Result
from wms.infrastructure.persistence.models.company import Company
from wms.infrastructure.persistence.repositories.company_repo import \
    CompanyRepository
from wms.shared.context import get_current_actor
from wms.shared.telemetry.logging import get_logger

if TYPE_CHECKING:
    from wms.presentation.api.v1.schemas.company import (CompanyCreate,
                                                         CompanyUpdate)

logger = get_logger(__name__)


class CompanyService:
    def __init__(self, company_repo: CompanyRepository) -> None:
        self.company_repo = company_repo

    async def get(self, tenant_id: str) -> Result[Company]:
        company = await self.company_repo.get_by_tenant(tenant_id)
        if company is None:
            return Result.not_found("Company")
        return Result.ok(company)

    async def create(self, tenant_id: str, data: "CompanyCreate") -> Result[Company]:
        if await self.company_repo.get_by_tenant(tenant_id) is not None:
            return Result.fail("A company is already registered for this tenant", ErrorType.DOMAIN)
        # CNPJ is unique across tenants
        if await self.company_repo.cnpj_exists(data.cnpj):
            return Result.fail("CNPJ already registered", ErrorType.DOMAIN)

        company = Company(
            tenant_id=tenant_id,
            legal_name=data.legal_name,
            trade_name=data.trade_name,
            cnpj=data.cnpj,
            state_registration=data.state_registration,
            municipal_registration=data.municipal_registration,
            email=data.email,
            phone=data.phone,
            mobile=data.mobile,
            website=data.website,
            postal_code=data.postal_code,
            street=data.street,
            number=data.number,
            complement=data.complement,
            district=data.district,
            city=data.city,
            state=data.state,
            opening_date=data.opening_date,
            share_capital=data.share_capital,
            main_activity=data.main_activity,
            tax_regime=data.tax_regime,
            legal_rep_name=data.legal_rep_name,
            legal_rep_cpf=data.legal_rep_cpf,
            legal_rep_position=data.legal_rep_position,
            legal_rep_email=data.legal_rep_email,
            legal_rep_phone=data.legal_rep_phone,
            created_by=get_current_actor(),
        )
        created = await self.company_repo.create(company)
        logger.info("Registered company %s for tenant %s", created.id, tenant_id)
        return Result.ok(created)

    async def update(self, tenant_id: str, data: "CompanyUpdate") -> Result[Company]:
        company = await self.company_repo.get_by_tenant(tenant_id)
        if company is None:
            return Result.not_found("Company")

        def pick(new, current):
            return new if new is not None else current

        company.update_info(
            get_current_actor(),
            legal_name=pick(data.legal_name, company.legal_name),
            trade_name=pick(data.trade_name, company.trade_name),
            state_registration=pick(data.state_registration, company.state_registration),
            municipal_registration=pick(
                data.municipal_registration, company.municipal_registration
            ),
            email=pick(data.email, company.email),
            phone=pick(data.phone, company.phone),
            mobile=pick(data.mobile, company.mobile),
            website=pick(data.website, company.website),
            postal_code=pick(data.postal_code, company.postal_code),
            street=pick(data.street, company.street),
            number=pick(data.number, company.number),
            complement=pick(data.complement, company.complement),
            district=pick(data.district, company.district),
            city=pick(data.city, company.city),
            state=pick(data.state, company.state),
            opening_date=pick(data.opening_date, company.opening_date),
            share_capital=pick(data.share_capital, company.share_capital),
            main_activity=pick(data.main_activity, company.main_activity),
            tax_regime=pick(data.tax_regime, company.tax_regime),
            legal_rep_name=pick(data.legal_rep_name, company.legal_rep_name),
            legal_rep_cpf=pick(data.legal_rep_cpf, company.legal_rep_cpf),
            legal_rep_position=pick(data.legal_rep_position, company.legal_rep_position),
            legal_rep_email=pick(data.legal_rep_email, company.legal_rep_email),
            legal_rep_phone=pick(data.legal_rep_phone, company.legal_rep_phone),
        )
        return Result.ok(await self.company_repo.update(company))

    async def delete(self, tenant_id: str) -> Result[None]:
        """Soft delete; frees the CNPJ and lets the tenant register a company again"""
        company = await self.company_repo.get_by_tenant(tenant_id)
        if company is None:
            return Result.not_found("Company")

        await self.company_repo.soft_delete(company, get_current_actor())
        logger.info("Deleted company %s for tenant %s", company.id, tenant_id)
        return Result.ok()
