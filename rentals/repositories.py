"""
Rental repositories - Data access layer for rental groups and their members.
"""
from contextlib import contextmanager
from typing import List, Optional
from django.db import IntegrityError, transaction
from django.db.models import QuerySet
from django.utils import timezone
from core.repositories import BaseRepository
from core.constants import RentalStatus
from core.exceptions import ConflictError
from .models import Rental, RentalMember


class RentalRepository(BaseRepository[Rental]):
    """Repository for Rental model"""

    @contextmanager
    def _one_active_per_apartment(self, apartment_id: int, rental_id: Optional[int] = None):
        """
        Turn a violation of the one-active-rental constraint into a ConflictError.

        The write runs in a savepoint, so the surrounding transaction stays usable.
        """
        try:
            with transaction.atomic():
                yield
        except IntegrityError as exc:
            if not self.has_other_active(apartment_id, exclude_id=rental_id):
                raise
            raise ConflictError(
                message="This apartment already has an active rental",
                code="ACTIVE_RENTAL_EXISTS",
                details={"apartment_id": apartment_id}
            ) from exc

    def create(self, **fields) -> Rental:
        apartment_id = fields.get('apartment_id') or fields['apartment'].id
        with self._one_active_per_apartment(apartment_id):
            return super().create(**fields)

    def update(self, instance: Rental, **fields) -> Rental:
        with self._one_active_per_apartment(instance.apartment_id, instance.id):
            return super().update(instance, **fields)

    def get_by_apartment(self, apartment_id: int, status: Optional[str] = None) -> QuerySet[Rental]:
        """Rental groups of an apartment, newest first"""
        return (
            self.get_queryset()
            .filter(apartment_id=apartment_id)
            .with_status(status)
            .with_members()
            .order_by('-created_at', '-id')
        )

    def get_by_tenant(self, tenant_id: int) -> QuerySet[Rental]:
        return (
            self.get_queryset()
            .filter(members__tenant_id=tenant_id)
            .with_members()
            .order_by('-created_at', '-id')
            .distinct()
        )

    def has_other_active(self, apartment_id: int, exclude_id: Optional[int] = None) -> bool:
        """Whether the apartment already has an active rental (other than ``exclude_id``)"""
        queryset = self.get_all(apartment_id=apartment_id, status=RentalStatus.ACTIVE)
        if exclude_id is not None:
            queryset = queryset.exclude(id=exclude_id)
        return queryset.exists()


class RentalMemberRepository(BaseRepository[RentalMember]):
    """Repository for RentalMember model"""

    def get_member_ids(self, rental_id: int) -> List[int]:
        return list(self.get_all(rental_id=rental_id).values_list('tenant_id', flat=True))

    def get_member(self, rental_id: int, tenant_id: int) -> Optional[RentalMember]:
        return self.get_all(rental_id=rental_id, tenant_id=tenant_id).first()

    def add_members(self, rental: Rental, tenants, added_at=None) -> List[RentalMember]:
        """Attach tenants to a rental group"""
        added_at = added_at or timezone.now()
        return self.bulk_create([
            RentalMember(rental=rental, tenant=tenant, added_at=added_at)
            for tenant in tenants
        ])
