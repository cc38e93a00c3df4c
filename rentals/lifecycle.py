"""
Rental lifecycle and payment-status derivation.

Pure functions over dates, timestamps and status values. Nothing here touches
the database, so views, serializers, management commands and tests can all
share the same rules.

    describe_payment()   -> label / timing / warning shown for a rental
    lifecycle_phase()    -> reserved, current, overdue, completed, ...
    next_due_date()      -> due date of the renewal rental
    settlement_status()  -> 'paid' or 'late' when a payment is recorded
"""
import math
from dataclasses import dataclass, asdict
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Iterable, Optional

from dateutil.relativedelta import relativedelta
from django.conf import settings
from django.utils import timezone

from core.constants import (
    ApartmentStatus,
    DefaultLimits,
    PaymentStatus,
    RentalPhase,
    RentalStatus,
)

SECONDS_PER_DAY = 24 * 60 * 60
CENTS = Decimal('0.01')


@dataclass
class PaymentDescription:
    """What the payment badge of a rental says"""
    status: str
    date: Optional[str] = None
    timing: Optional[str] = None
    is_warning: bool = False
    warning_text: Optional[str] = None
    is_late_payment: bool = False
    is_overdue: bool = False
    days_until_due: Optional[int] = None

    def as_dict(self):
        return asdict(self)


def due_soon_days() -> int:
    return getattr(settings, 'RENTAL_DUE_SOON_DAYS', DefaultLimits.DUE_SOON_DAYS)


def due_moment(due_date: date) -> datetime:
    """Start of the due date in the current timezone"""
    if isinstance(due_date, datetime):
        due_date = due_date.date()
    return timezone.make_aware(datetime.combine(due_date, time.min), timezone.get_current_timezone())


def days_until_due(due_date: date, now: Optional[datetime] = None) -> int:
    """
    Whole days left until the due date, rounded up.

    Positive while the due date is ahead, zero or negative once it has
    started or passed.
    """
    now = now or timezone.now()
    seconds = (due_moment(due_date) - now).total_seconds()
    return math.ceil(seconds / SECONDS_PER_DAY)


def is_past_due(due_date: date, now: Optional[datetime] = None) -> bool:
    now = now or timezone.now()
    return now > due_moment(due_date)


def format_day(value) -> str:
    if isinstance(value, datetime):
        value = timezone.localtime(value) if timezone.is_aware(value) else value
        value = value.date()
    return value.strftime('%d %b %Y')


def format_amount(value) -> str:
    """Money total as a 2-place decimal string, like the serializers render prices"""
    return str(Decimal(value or 0).quantize(CENTS))


def describe_payment(payment_status: str, paid_at: Optional[datetime], due_date: date,
                     now: Optional[datetime] = None) -> PaymentDescription:
    """Describe the payment state of a rental for display"""
    now = now or timezone.now()

    if payment_status == PaymentStatus.PAID:
        return PaymentDescription(
            status='PAID',
            date=f"Paid on {format_day(paid_at)}" if paid_at else 'Paid',
            is_late_payment=bool(paid_at and paid_at > due_moment(due_date)),
        )

    if payment_status == PaymentStatus.UNPAID:
        days = days_until_due(due_date, now)
        is_warning = 0 < days <= due_soon_days()
        if is_warning:
            warning_text = 'Payment due soon!'
        elif days <= 0:
            warning_text = 'Payment overdue!'
        else:
            warning_text = None
        return PaymentDescription(
            status='UNPAID',
            timing=f"{days} days until due" if days > 0 else f"{abs(days)} days overdue",
            is_warning=is_warning,
            warning_text=warning_text,
            is_overdue=days <= 0,
            days_until_due=days,
        )

    if payment_status == PaymentStatus.LATE:
        return PaymentDescription(
            status='LATE PAYMENT',
            date=f"Paid on {format_day(paid_at)}" if paid_at else 'Late',
            is_late_payment=True,
        )

    return PaymentDescription(status=str(payment_status).upper())


def lifecycle_phase(status: str, payment_status: str, assigned_date: Optional[datetime],
                    due_date: date, now: Optional[datetime] = None) -> str:
    """Where a rental is in its life: reserved, current, overdue or its closed status"""
    now = now or timezone.now()
    if status != RentalStatus.ACTIVE:
        return status
    if assigned_date and assigned_date > now:
        return RentalPhase.RESERVED
    if payment_status == PaymentStatus.UNPAID and days_until_due(due_date, now) <= 0:
        return RentalPhase.OVERDUE
    return RentalPhase.CURRENT


def next_due_date(due_date: date) -> date:
    """Same day next month, clamped to the end of shorter months (31 Jan -> 28/29 Feb)"""
    return due_date + relativedelta(months=1)


def settlement_status(due_date: date, now: Optional[datetime] = None) -> str:
    """Payment status to record for a rental paid at ``now``"""
    return PaymentStatus.LATE if is_past_due(due_date, now) else PaymentStatus.PAID


def apartment_status(statuses: Iterable[str]) -> str:
    """An apartment is occupied while any of its rentals is active"""
    if any(status == RentalStatus.ACTIVE for status in statuses):
        return ApartmentStatus.OCCUPIED
    return ApartmentStatus.AVAILABLE


def attention_window(now: Optional[datetime] = None, within_days: Optional[int] = None) -> date:
    """Last due date that counts as 'due soon' from ``now``"""
    now = now or timezone.now()
    within_days = due_soon_days() if within_days is None else within_days
    return timezone.localtime(now).date() + timedelta(days=within_days)
