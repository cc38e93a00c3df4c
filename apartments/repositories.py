"""
Apartment repository - Data access layer for the apartment inventory.
"""
from django.db.models import QuerySet, Sum, Count
from core.repositories import BaseRepository
from core.constants import RentalStatus
from rentals.lifecycle import format_amount
from .models import Apartment


class ApartmentRepository(BaseRepository[Apartment]):
    """Repository for Apartment model"""

    def get_payment_history(self, apartment: Apartment) -> QuerySet:
        """Paid (on time or late) rentals of an apartment, latest payment first"""
        return (
            apartment.rentals.settled()
            .prefetch_related('members__tenant')
            .order_by('-paid_at', '-id')
        )

    def get_payment_summary(self, apartment: Apartment) -> dict:
        """Received and expected totals of an apartment"""
        received = apartment.rentals.settled().aggregate(total=Sum('price'), count=Count('id'))
        expected = apartment.rentals.filter(status=RentalStatus.ACTIVE).aggregate(
            total=Sum('price'), count=Count('id')
        )
        return {
            'total_received': format_amount(received['total']),
            'payment_count': received['count'],
            'expected': format_amount(expected['total']),
            'active_count': expected['count'],
        }
