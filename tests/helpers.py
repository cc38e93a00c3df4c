"""
Shared helpers for rental admin tests.
"""
from datetime import datetime
from decimal import Decimal
from zoneinfo import ZoneInfo

from apartments.models import Apartment
from tenants.models import Tenant

BANGKOK = ZoneInfo('Asia/Bangkok')


def bangkok(year, month, day, hour=0, minute=0):
    """Aware datetime in the business timezone"""
    return datetime(year, month, day, hour, minute, tzinfo=BANGKOK)


def make_apartment(name='Garden Room A1', base_price='4500.00', room_count=1):
    return Apartment.objects.create(name=name, base_price=Decimal(base_price), room_count=room_count)


def make_tenant(full_name='Somchai Prasert', **fields):
    return Tenant.objects.create(full_name=full_name, **fields)
