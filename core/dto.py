"""
Data Transfer Objects (DTOs).
Used for passing data between layers without exposing domain models.
"""
from dataclasses import dataclass, field
from typing import Optional, List
from decimal import Decimal
from datetime import date


@dataclass
class NewTenantDTO:
    """A tenant to be created as part of a rental operation"""
    full_name: str = ""
    contact_info: str = ""
    phone_number: str = ""
    email: str = ""
    move_in_date: Optional[date] = None


@dataclass
class RentalDTO:
    """Data for opening a rental group on an apartment"""
    due_date: date = None
    price: Optional[Decimal] = None
    tenant_ids: List[int] = field(default_factory=list)
    new_tenants: List[NewTenantDTO] = field(default_factory=list)


@dataclass
class PaymentDTO:
    """Data for recording a payment, optionally renewing the rental"""
    renew: bool = True
    next_due_date: Optional[date] = None
    tenant_ids: Optional[List[int]] = None
    new_tenants: List[NewTenantDTO] = field(default_factory=list)
