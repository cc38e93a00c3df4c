"""
Tenant service - Business logic for tenant records.
"""
from typing import Iterable, List
from django.db import transaction
from core.services import BaseService
from core.exceptions import NotFoundError
from core.validators import TenantValidator
from core.dto import NewTenantDTO
from .repositories import TenantRepository
from .models import Tenant


class TenantService(BaseService):
    """Service for tenant-related business logic"""

    def __init__(self):
        super().__init__()
        self.tenant_repo = TenantRepository(Tenant)

    def create_tenant(self, tenant_data: NewTenantDTO) -> Tenant:
        """
        Create a tenant after validating the contact fields.

        Raises:
            ValidationError: If name, phone or email are invalid
        """
        full_name = (tenant_data.full_name or '').strip()
        TenantValidator.validate_full_name(full_name)
        TenantValidator.validate_phone_number(tenant_data.phone_number)
        TenantValidator.validate_email(tenant_data.email)

        with transaction.atomic():
            tenant = self.tenant_repo.create(
                full_name=full_name,
                contact_info=tenant_data.contact_info or '',
                phone_number=tenant_data.phone_number or '',
                email=tenant_data.email or '',
                move_in_date=tenant_data.move_in_date,
            )
            self.log_info(f"Tenant created: {tenant.full_name}", tenant_id=tenant.id)
            return tenant

    def resolve_tenants(self, tenant_ids: Iterable[int], new_tenants: Iterable[NewTenantDTO]) -> List[Tenant]:
        """
        Existing tenants by id followed by freshly created ones.

        Raises:
            NotFoundError: If any of ``tenant_ids`` does not exist
        """
        ids = list(dict.fromkeys(tenant_ids or []))
        found = {tenant.id: tenant for tenant in self.tenant_repo.get_many(ids)}
        missing = [tenant_id for tenant_id in ids if tenant_id not in found]
        if missing:
            raise NotFoundError(
                resource_type="Tenant",
                resource_id=missing[0],
                details={"missing_ids": missing}
            )

        tenants = [found[tenant_id] for tenant_id in ids]
        tenants.extend(self.create_tenant(data) for data in (new_tenants or []))
        return tenants
