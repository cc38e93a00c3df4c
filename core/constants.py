"""
Application-wide constants.
Centralized constants following DRY principle.
"""


# Rental (rental group) lifecycle status
class RentalStatus:
    ACTIVE = 'active'
    COMPLETED = 'completed'
    ENDED = 'ended'
    CANCELLED = 'cancelled'

    CHOICES = [
        (ACTIVE, 'Active'),
        (COMPLETED, 'Completed'),
        (ENDED, 'Ended'),
        (CANCELLED, 'Cancelled'),
    ]

    VALUES = [value for value, _ in CHOICES]

    # Rentals in these states can no longer be edited
    CLOSED = [COMPLETED, CANCELLED]


# Payment status of a rental
class PaymentStatus:
    PAID = 'paid'
    UNPAID = 'unpaid'
    LATE = 'late'

    CHOICES = [
        (PAID, 'Paid'),
        (UNPAID, 'Unpaid'),
        (LATE, 'Late'),
    ]

    SETTLED = [PAID, LATE]


# Apartment occupancy, derived from its rentals
class ApartmentStatus:
    OCCUPIED = 'occupied'
    AVAILABLE = 'available'


# Lifecycle phase of a rental, derived from status, dates and payment
class RentalPhase:
    RESERVED = 'reserved'
    CURRENT = 'current'
    OVERDUE = 'overdue'
    COMPLETED = RentalStatus.COMPLETED
    ENDED = RentalStatus.ENDED
    CANCELLED = RentalStatus.CANCELLED


# Default Limits
class DefaultLimits:
    DUE_SOON_DAYS = 3
    MAX_PRICE = 9999999.99


# Pagination
class Pagination:
    DEFAULT_PAGE_SIZE = 10
    PAGE_SIZE_CHOICES = [5, 10, 20, 50, 100]
    RENTAL_PAGE_SIZE = 5
    RENTAL_PAGE_SIZE_CHOICES = [5, 10, 20, 50]
    MAX_PAGE_SIZE = 100
