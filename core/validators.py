"""
Validation utilities and validators.
Centralized validation logic following single responsibility principle.
"""
import re
from decimal import Decimal

from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email

from core.constants import DefaultLimits
from core.exceptions import ValidationError as AppValidationError

PHONE_NUMBER_PATTERN = r'^\d{11}$'
PHONE_NUMBER_RE = re.compile(PHONE_NUMBER_PATTERN)


class ApartmentValidator:
    """Validates apartment fields"""

    @staticmethod
    def validate_name(name):
        if not name or not str(name).strip():
            raise AppValidationError(
                message="Name is required.",
                code="NAME_REQUIRED",
                details={"field": "name"}
            )

    @staticmethod
    def validate_base_price(base_price: Decimal):
        if base_price is None or base_price <= 0:
            raise AppValidationError(
                message="Price must be greater than 0.",
                code="INVALID_BASE_PRICE",
                details={"field": "base_price"}
            )

    @staticmethod
    def validate_room_count(room_count: int):
        if room_count is None or room_count < 1:
            raise AppValidationError(
                message="Rooms must be at least 1.",
                code="INVALID_ROOM_COUNT",
                details={"field": "room_count"}
            )


class TenantValidator:
    """Validates tenant contact fields"""

    @staticmethod
    def validate_full_name(full_name):
        if not full_name or not str(full_name).strip():
            raise AppValidationError(
                message="Full name is required.",
                code="FULL_NAME_REQUIRED",
                details={"field": "full_name"}
            )

    @staticmethod
    def validate_phone_number(phone_number):
        """Phone is optional, but when given it must be exactly 11 digits"""
        if phone_number and not PHONE_NUMBER_RE.match(phone_number):
            raise AppValidationError(
                message="Phone must be exactly 11 digits",
                code="INVALID_PHONE_NUMBER",
                details={"field": "phone_number"}
            )

    @staticmethod
    def validate_email(email):
        if not email:
            return
        try:
            validate_email(email)
        except DjangoValidationError:
            raise AppValidationError(
                message="Invalid email format",
                code="INVALID_EMAIL",
                details={"field": "email"}
            )


class RentalValidator:
    """Validates rental-related operations"""

    @staticmethod
    def validate_price(price: Decimal):
        """Validate rental price"""
        if price is None:
            raise AppValidationError(
                message="Rental price is required",
                code="RENTAL_PRICE_REQUIRED"
            )
        if price < 0:
            raise AppValidationError(
                message="Rental price cannot be negative",
                code="INVALID_RENTAL_PRICE"
            )
        if price > Decimal(str(DefaultLimits.MAX_PRICE)):
            raise AppValidationError(
                message="Rental price exceeds maximum allowed",
                code="RENTAL_PRICE_TOO_LARGE"
            )

    @staticmethod
    def validate_due_date(due_date):
        if due_date is None:
            raise AppValidationError(
                message="Due date is required",
                code="DUE_DATE_REQUIRED"
            )

    @staticmethod
    def validate_members(tenant_count: int):
        """A rental group needs at least one tenant"""
        if tenant_count < 1:
            raise AppValidationError(
                message="Please select at least one tenant",
                code="TENANTS_REQUIRED"
            )
