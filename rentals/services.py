"""
Rental service - Business logic for rental groups.

Every operation runs in a single database transaction and locks the rows it
changes, so a failure part way through (e.g. while creating the renewal of a
paid rental) leaves nothing half-written.
"""
from datetime import datetime
from typing import List, Optional, Tuple
from django.db import transaction
from core.services import BaseService
from core.exceptions import (
    BaseApplicationException,
    BusinessLogicError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from core.validators import RentalValidator
from core.constants import PaymentStatus, RentalStatus
from core.dto import NewTenantDTO, PaymentDTO, RentalDTO
from apartments.repositories import ApartmentRepository
from apartments.models import Apartment
from tenants.services import TenantService
from . import lifecycle
from .repositories import RentalRepository, RentalMemberRepository
from .models import Rental, RentalMember


class RentalService(BaseService):
    """Service for rental groups: assignment, membership, status and payment"""

    def __init__(self):
        super().__init__()
        self.rental_repo = RentalRepository(Rental)
        self.member_repo = RentalMemberRepository(RentalMember)
        self.apartment_repo = ApartmentRepository(Apartment)
        self.tenant_service = TenantService()

    def _ensure_no_active_rental(self, apartment_id: int, exclude_id: Optional[int] = None):
        # Every path that makes a rental active serialises on the apartment row
        self.apartment_repo.lock(apartment_id)
        if self.rental_repo.has_other_active(apartment_id, exclude_id=exclude_id):
            self.log_warning("Apartment already has an active rental", apartment_id=apartment_id)
            raise ConflictError(
                message="This apartment already has an active rental",
                code="ACTIVE_RENTAL_EXISTS",
                details={"apartment_id": apartment_id}
            )

    def _ensure_open(self, rental: Rental, action: str):
        if rental.is_closed:
            raise BusinessLogicError(
                message=f"Cannot {action} a {rental.status} rental",
                code="RENTAL_CLOSED",
                details={"rental_id": rental.id, "status": rental.status}
            )

    @transaction.atomic
    def create_rental(self, apartment_id: int, rental_data: RentalDTO, now: Optional[datetime] = None) -> Rental:
        """
        Assign tenants to an apartment as a new active, unpaid rental group.

        The price defaults to the apartment's base price.

        Raises:
            NotFoundError: If the apartment or a tenant doesn't exist
            ConflictError: If the apartment already has an active rental
            ValidationError: If no tenant is given or the price/due date is invalid
        """
        now = self.now(now)
        apartment = self.apartment_repo.lock(apartment_id)

        price = apartment.base_price if rental_data.price is None else rental_data.price
        RentalValidator.validate_due_date(rental_data.due_date)
        RentalValidator.validate_price(price)
        RentalValidator.validate_members(len(rental_data.tenant_ids or []) + len(rental_data.new_tenants or []))
        self._ensure_no_active_rental(apartment.id)

        rental = self.rental_repo.create(
            apartment=apartment,
            assigned_date=now,
            due_date=rental_data.due_date,
            price=price,
            status=RentalStatus.ACTIVE,
            payment_status=PaymentStatus.UNPAID,
        )
        tenants = self.tenant_service.resolve_tenants(rental_data.tenant_ids, rental_data.new_tenants)
        self.member_repo.add_members(rental, tenants, added_at=now)

        self.log_info(
            f"Rental created for {apartment.name}",
            rental_id=rental.id, apartment_id=apartment.id, tenants=len(tenants)
        )
        return rental

    @transaction.atomic
    def add_members(self, rental_id: int, tenant_ids: List[int] = None,
                    new_tenants: List[NewTenantDTO] = None) -> List[RentalMember]:
        """
        Add existing and/or new tenants to a rental group.

        Raises:
            BusinessLogicError: If the rental is cancelled or completed
            ConflictError: If a tenant is already a member
        """
        tenant_ids = list(tenant_ids or [])
        new_tenants = list(new_tenants or [])
        rental = self.rental_repo.lock(rental_id)
        self._ensure_open(rental, "add tenants to")
        RentalValidator.validate_members(len(tenant_ids) + len(new_tenants))

        current = set(self.member_repo.get_member_ids(rental.id))
        already = [tenant_id for tenant_id in tenant_ids if tenant_id in current]
        if already:
            raise ConflictError(
                message="Tenant is already a member of this rental",
                code="ALREADY_MEMBER",
                details={"tenant_ids": already}
            )

        tenants = self.tenant_service.resolve_tenants(tenant_ids, new_tenants)
        members = self.member_repo.add_members(rental, tenants)
        self.log_info("Tenants added to rental", rental_id=rental.id, tenant_ids=[t.id for t in tenants])
        return members

    @transaction.atomic
    def remove_member(self, rental_id: int, tenant_id: int) -> None:
        """
        Remove a tenant from an active rental group.

        Raises:
            BusinessLogicError: If the rental is not active
            NotFoundError: If the tenant is not a member
        """
        rental = self.rental_repo.lock(rental_id)
        if not rental.is_active:
            raise BusinessLogicError(
                message="Tenants can only be removed from an active rental",
                code="RENTAL_NOT_ACTIVE",
                details={"rental_id": rental.id, "status": rental.status}
            )

        member = self.member_repo.get_member(rental.id, tenant_id)
        if member is None:
            raise NotFoundError(
                resource_type="RentalMember",
                resource_id=tenant_id,
                message=f"Tenant {tenant_id} is not a member of rental {rental.id}"
            )
        self.member_repo.delete(member)
        self.log_info("Tenant removed from rental", rental_id=rental.id, tenant_id=tenant_id)

    @transaction.atomic
    def update_rental(self, rental_id: int, due_date=None, price=None) -> Rental:
        """
        Edit the due date and/or price of a rental.

        Raises:
            BusinessLogicError: If the rental is cancelled or completed
        """
        rental = self.rental_repo.lock(rental_id)
        self._ensure_open(rental, "edit")

        changes = {}
        if due_date is not None:
            changes['due_date'] = due_date
        if price is not None:
            RentalValidator.validate_price(price)
            changes['price'] = price
        if not changes:
            return rental

        self.rental_repo.update(rental, **changes)
        self.log_info("Rental updated", rental_id=rental.id, fields=sorted(changes))
        return rental

    @transaction.atomic
    def set_status(self, rental_id: int, status: str) -> Rental:
        """
        Plain status update.

        Raises:
            ValidationError: If ``status`` is unknown
            ConflictError: If activating while another rental is active
        """
        if status not in RentalStatus.VALUES:
            raise ValidationError(
                message=f"Invalid rental status: {status}",
                code="INVALID_STATUS",
                details={"field": "status", "choices": RentalStatus.VALUES}
            )

        rental = self.rental_repo.lock(rental_id)
        if status == RentalStatus.ACTIVE:
            self._ensure_no_active_rental(rental.apartment_id, exclude_id=rental.id)

        previous = rental.status
        self.rental_repo.update(rental, status=status)
        self.log_info("Rental status changed", rental_id=rental.id, previous=previous, status=status)
        return rental

    @transaction.atomic
    def cancel_rental(self, rental_id: int, reason: str = '', now: Optional[datetime] = None) -> Rental:
        """
        Cancel an active rental.

        Raises:
            BusinessLogicError: If the rental is not active
        """
        rental = self.rental_repo.lock(rental_id)
        if not rental.is_active:
            raise BusinessLogicError(
                message="Only active rentals can be cancelled",
                code="RENTAL_NOT_ACTIVE",
                details={"rental_id": rental.id, "status": rental.status}
            )

        self.rental_repo.update(
            rental,
            status=RentalStatus.CANCELLED,
            cancelled_at=self.now(now),
            cancellation_reason=reason or '',
        )
        self.log_info("Rental cancelled", rental_id=rental.id, apartment_id=rental.apartment_id)
        return rental

    @transaction.atomic
    def activate_rental(self, rental_id: int) -> Rental:
        """
        Re-activate a cancelled rental.

        Raises:
            BusinessLogicError: If the rental is not cancelled
            ConflictError: If the apartment has another active rental
        """
        rental = self.rental_repo.lock(rental_id)
        if rental.status != RentalStatus.CANCELLED:
            raise BusinessLogicError(
                message="Only cancelled rentals can be activated",
                code="RENTAL_NOT_CANCELLED",
                details={"rental_id": rental.id, "status": rental.status}
            )
        self._ensure_no_active_rental(rental.apartment_id, exclude_id=rental.id)

        self.rental_repo.update(rental, status=RentalStatus.ACTIVE, cancelled_at=None)
        self.log_info("Rental activated", rental_id=rental.id, apartment_id=rental.apartment_id)
        return rental

    def _settle(self, rental: Rental, now: datetime) -> Rental:
        if rental.status == RentalStatus.CANCELLED:
            raise BusinessLogicError(
                message="Cannot record a payment for a cancelled rental",
                code="RENTAL_CANCELLED",
                details={"rental_id": rental.id}
            )
        if rental.payment_status != PaymentStatus.UNPAID:
            raise ConflictError(
                message="This rental has already been paid",
                code="ALREADY_PAID",
                details={"rental_id": rental.id, "payment_status": rental.payment_status}
            )

        payment_status = lifecycle.settlement_status(rental.due_date, now)
        self.rental_repo.update(
            rental,
            payment_status=payment_status,
            status=RentalStatus.COMPLETED,
            paid_at=now,
        )
        self.log_info(
            "Payment recorded",
            rental_id=rental.id, payment_status=payment_status, amount=str(rental.price)
        )
        return rental

    @transaction.atomic
    def mark_paid(self, rental_id: int, now: Optional[datetime] = None) -> Rental:
        """
        Record the payment of a rental without renewing it.

        The rental is completed; the payment is 'late' when recorded after the due date.

        Raises:
            BusinessLogicError: If the rental is cancelled
            ConflictError: If the rental is already paid
        """
        rental = self.rental_repo.lock(rental_id)
        return self._settle(rental, self.now(now))

    @transaction.atomic
    def record_payment(self, rental_id: int, payment_data: PaymentDTO,
                       now: Optional[datetime] = None) -> Tuple[Rental, Optional[Rental]]:
        """
        Record a payment and optionally open the next period.

        When renewing, a new active, unpaid rental is created for the same
        apartment and price, due one month after the paid rental (unless
        ``next_due_date`` is given). Its members default to the members of
        the paid rental.

        Returns:
            (paid rental, renewal rental or None)
        """
        now = self.now(now)
        rental = self.rental_repo.lock(rental_id)
        member_ids = self.member_repo.get_member_ids(rental.id)
        self._settle(rental, now)

        if not payment_data.renew:
            return rental, None

        tenant_ids = member_ids if payment_data.tenant_ids is None else list(payment_data.tenant_ids)
        new_tenants = list(payment_data.new_tenants or [])
        RentalValidator.validate_members(len(tenant_ids) + len(new_tenants))
        self._ensure_no_active_rental(rental.apartment_id)

        renewal = self.rental_repo.create(
            apartment_id=rental.apartment_id,
            assigned_date=now,
            due_date=payment_data.next_due_date or lifecycle.next_due_date(rental.due_date),
            price=rental.price,
            status=RentalStatus.ACTIVE,
            payment_status=PaymentStatus.UNPAID,
        )
        try:
            tenants = self.tenant_service.resolve_tenants(tenant_ids, new_tenants)
            self.member_repo.add_members(renewal, tenants, added_at=now)
        except BaseApplicationException as exc:
            # The whole payment is rolled back with the renewal
            self.log_error("Renewal failed, payment not recorded", exc, rental_id=rental.id)
            raise

        self.log_info(
            "Rental renewed",
            rental_id=rental.id, renewal_id=renewal.id, due_date=str(renewal.due_date)
        )
        return rental, renewal
