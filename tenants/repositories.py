"""
Tenant repository - Data access layer for tenant records.
"""
from typing import List
from django.db.models import QuerySet
from core.repositories import BaseRepository
from .models import Tenant


class TenantRepository(BaseRepository[Tenant]):
    """Repository for Tenant model"""

    def get_many(self, ids: List[int]) -> QuerySet[Tenant]:
        return self.get_all(id__in=ids)

    def get_available_for(self, apartment) -> QuerySet[Tenant]:
        """Tenants who can still be added to a rental of ``apartment``"""
        return self.get_queryset().not_in_active_rental_of(apartment).order_by('full_name')
