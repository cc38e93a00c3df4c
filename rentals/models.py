from django.db import models
from django.core.validators import MinValueValidator
from django.utils import timezone

from apartments.models import Apartment
from core.constants import PaymentStatus, RentalStatus
from tenants.models import Tenant
from . import lifecycle

ONE_ACTIVE_RENTAL = 'one_active_rental_per_apartment'


class RentalQuerySet(models.QuerySet):
    """Rental queries used by the apartment page, dashboard and commands"""

    def active(self):
        return self.filter(status=RentalStatus.ACTIVE)

    def with_status(self, status):
        """Filter by status; 'all' (or nothing) keeps every rental"""
        if not status or status == 'all':
            return self
        return self.filter(status=status)

    def settled(self):
        """Rentals that have been paid, on time or late"""
        return self.filter(payment_status__in=PaymentStatus.SETTLED)

    def awaiting_payment(self):
        return self.active().filter(payment_status=PaymentStatus.UNPAID)

    def overdue(self, now=None):
        """Active, unpaid rentals whose due date has started or passed"""
        today = timezone.localtime(now or timezone.now()).date()
        return self.awaiting_payment().filter(due_date__lte=today)

    def due_soon(self, now=None, within_days=None):
        """Active, unpaid rentals due within the next few days (not yet overdue)"""
        today = timezone.localtime(now or timezone.now()).date()
        return self.awaiting_payment().filter(
            due_date__gt=today,
            due_date__lte=lifecycle.attention_window(now, within_days),
        )

    def needing_attention(self, now=None, within_days=None):
        """Overdue plus due-soon rentals, earliest due first"""
        return (self.overdue(now) | self.due_soon(now, within_days)).order_by('due_date')

    def with_members(self):
        return self.select_related('apartment').prefetch_related('members__tenant')


class Rental(models.Model):
    """
    Rental group - one billing period of an apartment for one or more tenants.

    Lifecycle:
    - created 'active' + 'unpaid'
    - payment recorded -> 'completed' + 'paid' (or 'late' when paid after the due date),
      optionally followed by a renewal rental for the next period
    - may be 'cancelled' (and re-activated) or 'ended'
    """
    apartment = models.ForeignKey(Apartment, on_delete=models.CASCADE, related_name='rentals')
    assigned_date = models.DateTimeField(default=timezone.now)
    due_date = models.DateField()
    price = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    payment_status = models.CharField(max_length=10, choices=PaymentStatus.CHOICES, default=PaymentStatus.UNPAID)
    status = models.CharField(max_length=10, choices=RentalStatus.CHOICES, default=RentalStatus.ACTIVE)
    paid_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    cancellation_reason = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = RentalQuerySet.as_manager()

    class Meta:
        ordering = ['-created_at']
        verbose_name = "Rental"
        verbose_name_plural = "Rentals"
        indexes = [
            models.Index(fields=['apartment', 'status'], name='rental_apt_status_idx'),
            models.Index(fields=['apartment', 'payment_status'], name='rental_apt_payment_idx'),
            models.Index(fields=['status', 'payment_status', 'due_date'], name='rental_due_idx'),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['apartment'],
                condition=models.Q(status=RentalStatus.ACTIVE),
                name=ONE_ACTIVE_RENTAL,
                violation_error_message="This apartment already has an active rental",
            ),
        ]

    def __str__(self):
        return f"{self.apartment.name} - due {self.due_date:%Y-%m-%d} ({self.get_status_display()})"

    @property
    def is_active(self):
        return self.status == RentalStatus.ACTIVE

    @property
    def is_closed(self):
        """Completed and cancelled rentals can no longer be edited"""
        return self.status in RentalStatus.CLOSED

    @property
    def tenant_names(self):
        return ', '.join(member.tenant.full_name for member in self.members.all())

    def payment_description(self, now=None):
        return lifecycle.describe_payment(self.payment_status, self.paid_at, self.due_date, now)

    def phase(self, now=None):
        return lifecycle.lifecycle_phase(self.status, self.payment_status, self.assigned_date, self.due_date, now)


class RentalMember(models.Model):
    """Tenant belonging to a rental group"""
    rental = models.ForeignKey(Rental, on_delete=models.CASCADE, related_name='members')
    tenant = models.ForeignKey(Tenant, on_delete=models.CASCADE, related_name='memberships')
    added_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['added_at', 'id']
        unique_together = ['rental', 'tenant']
        verbose_name = "Rental Member"
        verbose_name_plural = "Rental Members"
        indexes = [
            models.Index(fields=['tenant'], name='rental_member_tenant_idx'),
        ]

    def __str__(self):
        return f"{self.tenant.full_name} in rental #{self.rental_id}"
