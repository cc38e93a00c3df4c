from decimal import Decimal

from django.db import models
from django.core.validators import MinValueValidator

from core.constants import PaymentStatus, RentalStatus
from rentals.lifecycle import apartment_status


class ApartmentQuerySet(models.QuerySet):
    """Apartment queries with rental aggregates pre-computed"""

    def with_rental_stats(self):
        active = models.Q(rentals__status=RentalStatus.ACTIVE)
        return self.annotate(
            active_rental_count=models.Count('rentals', filter=active, distinct=True),
            next_due=models.Min(
                'rentals__due_date',
                filter=active & models.Q(rentals__payment_status=PaymentStatus.UNPAID),
            ),
        )


class Apartment(models.Model):
    """Rentable apartment in the inventory"""
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, help_text="Shown on the apartment details page (may contain HTML)")
    base_price = models.DecimalField(
        max_digits=10, decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))],
        help_text="Monthly price (THB). Default price of new rentals."
    )
    room_count = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ApartmentQuerySet.as_manager()

    class Meta:
        ordering = ['-created_at']
        verbose_name = "Apartment"
        verbose_name_plural = "Apartments"
        indexes = [
            models.Index(fields=['name'], name='apartment_name_idx'),
            models.Index(fields=['created_at'], name='apartment_created_idx'),
        ]

    def __str__(self):
        return self.name

    @property
    def has_active_rental(self):
        """True while a rental group is active - uses annotation when available"""
        count = getattr(self, 'active_rental_count', None)
        if count is None:
            return self.rentals.filter(status=RentalStatus.ACTIVE).exists()
        return count > 0

    @property
    def status(self):
        """'occupied' or 'available'"""
        return apartment_status([RentalStatus.ACTIVE] if self.has_active_rental else [])

    @property
    def next_payment_due(self):
        """Earliest due date among active, unpaid rentals"""
        if hasattr(self, 'next_due'):
            return self.next_due
        return self.rentals.filter(
            status=RentalStatus.ACTIVE,
            payment_status=PaymentStatus.UNPAID,
        ).aggregate(next_due=models.Min('due_date'))['next_due']
