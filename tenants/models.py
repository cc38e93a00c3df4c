from django.db import models
from django.core.validators import RegexValidator

from core.constants import RentalStatus
from core.validators import PHONE_NUMBER_PATTERN


class TenantQuerySet(models.QuerySet):

    def not_in_active_rental_of(self, apartment):
        """Tenants who are not members of an active rental of ``apartment``"""
        from rentals.models import RentalMember
        assigned = RentalMember.objects.filter(
            rental__apartment=apartment,
            rental__status=RentalStatus.ACTIVE,
        ).values('tenant_id')
        return self.exclude(id__in=assigned)


class Tenant(models.Model):
    """Person who rents (alone or as part of a rental group)"""
    full_name = models.CharField(max_length=255)
    contact_info = models.CharField(max_length=255, blank=True, help_text="Free-form contact details")
    phone_number = models.CharField(
        max_length=11, blank=True,
        validators=[RegexValidator(PHONE_NUMBER_PATTERN, 'Phone must be exactly 11 digits')]
    )
    email = models.EmailField(blank=True)
    move_in_date = models.DateField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TenantQuerySet.as_manager()

    class Meta:
        ordering = ['-created_at']
        verbose_name = "Tenant"
        verbose_name_plural = "Tenants"
        indexes = [
            models.Index(fields=['full_name'], name='tenant_name_idx'),
            models.Index(fields=['created_at'], name='tenant_created_idx'),
        ]

    def __str__(self):
        return self.full_name

    @property
    def active_rentals(self):
        """Active rental groups this tenant belongs to"""
        from rentals.models import Rental
        return Rental.objects.filter(members__tenant=self, status=RentalStatus.ACTIVE)
