"""
Utilities for apartments - payment history export
"""
import csv

from django.conf import settings
from django.http import HttpResponse
from django.utils import timezone
from django.utils.text import slugify


def export_payment_history(apartment, rentals):
    """
    Export an apartment's payment history to CSV

    Args:
        apartment: Apartment model instance
        rentals: QuerySet of paid Rental objects (members prefetched)

    Returns:
        HttpResponse with file
    """
    filename = f"payment_history_{slugify(apartment.name) or apartment.id}.csv"
    response = HttpResponse(content_type='text/csv')
    response['Content-Disposition'] = f'attachment; filename="{filename}"'

    currency = getattr(settings, 'RENTAL_CURRENCY', 'THB')
    writer = csv.writer(response)
    writer.writerow(['Paid On', 'Due Date', 'Tenants', f'Amount ({currency})', 'Payment Status'])

    for rental in rentals:
        paid_at = timezone.localtime(rental.paid_at).strftime('%Y-%m-%d %H:%M') if rental.paid_at else ''
        writer.writerow([
            paid_at,
            rental.due_date.strftime('%Y-%m-%d'),
            rental.tenant_names,
            f"{rental.price:.2f}",
            rental.get_payment_status_display(),
        ])

    return response
