"""
booking_manager.py
------------------
Coordinates the booking lifecycle: creation, payment confirmation,
cancellation and the per-user listing.

State machine (stored statuses):
    PENDING   --confirm_payment-->  CONFIRMED
    PENDING   --cancel_booking--->  CANCELLED
    CONFIRMED --cancel_booking--->  CANCELLED   (only while start_time > now)
FINISHED is derived at read time (CONFIRMED and start_time <= now).
CANCELLED and FINISHED are terminal.

Notes:
- Every transition re-reads the row with select_for_update inside a
  transaction; the manager never trusts a caller-supplied booking state.
- Creation delegates the exclusivity decision to ConflictGuard.
- Emails/notifications are fired by notifications.signals after the status
  is saved; their failure does not undo the booking.
"""

import logging

from django.db import transaction
from django.utils import timezone

from ..exceptions import InvalidSlot, InvalidTransition, NotFound
from ..models import ACTIVE_STATUSES, FINISHED, BookingStatus, PaymentMethod, Service
from .authorization import BookingAuthorizer
from .booking_store import BookingStore
from .clock import SystemClock
from .conflict_guard import ConflictGuard
from .slot_utils import default_catalog

logger = logging.getLogger(__name__)


class BookingManager:
    def __init__(self, store=None, guard=None, clock=None, authorizer=None, catalog=None):
        self.clock = clock or SystemClock()
        self.store = store or BookingStore()
        self.guard = guard or ConflictGuard(store=self.store, clock=self.clock)
        self.authorizer = authorizer or BookingAuthorizer()
        self._catalog = catalog

    def catalog(self):
        return self._catalog if self._catalog is not None else default_catalog()

    def _resolve_service(self, barber_id, service_id) -> Service:
        service = (
            Service.objects.select_related("barber")
            .filter(pk=service_id, active=True)
            .first()
        )
        if service is None:
            raise NotFound("Service not found.")
        if str(service.barber_id) != str(barber_id) or not service.barber.active:
            raise NotFound("Barber not found for this service.")
        return service

    def _check_slot_aligned(self, start_time) -> None:
        local = timezone.localtime(start_time, timezone.get_current_timezone())
        if local.second or local.microsecond or not self.catalog().contains(local.time()):
            raise InvalidSlot()

    def create_booking(self, user_id, barber_id, service_id, start_time, payment_method=PaymentMethod.CARD):
        """
        Create a booking after the exclusivity check.

        Args:
            user_id: owner (resolved by the session layer)
            barber_id / service_id: primary keys; the service must belong to the barber
            start_time: aware datetime (naive values are read in the current timezone)
            payment_method: CARD -> PENDING until the provider confirms,
                            ON_SITE -> CONFIRMED immediately

        Raises:
            NotFound, PastTimestamp, InvalidSlot, Conflict
        """
        if payment_method not in PaymentMethod.values:
            raise ValueError(f"Unknown payment method: {payment_method!r}")

        service = self._resolve_service(barber_id, service_id)

        if timezone.is_naive(start_time):
            start_time = timezone.make_aware(start_time, timezone.get_current_timezone())

        self.guard.check_future(start_time)
        self._check_slot_aligned(start_time)

        status = BookingStatus.PENDING if payment_method == PaymentMethod.CARD else BookingStatus.CONFIRMED

        booking = self.guard.reserve(
            barber_id=service.barber_id,
            start_time=start_time,
            user_id=user_id,
            service=service,
            status=status,
            payment_method=payment_method,
            price_cents=service.price_cents,
        )
        logger.info(
            "Booking %s created for user=%s barber=%s at %s (%s)",
            booking.id,
            user_id,
            service.barber_id,
            start_time.isoformat(),
            booking.status,
        )
        return booking

    def confirm_payment(self, booking_id, payment_reference: str = ""):
        """
        Apply a successful payment reported by the provider.
        Re-confirming a CONFIRMED booking is a no-op so redelivered
        webhooks are harmless.
        """
        with transaction.atomic():
            booking = self.store.get_for_update(booking_id)

            if booking.status == BookingStatus.CONFIRMED:
                logger.info("Booking %s already confirmed; ignoring repeated confirmation", booking.id)
                return booking
            if booking.status != BookingStatus.PENDING:
                raise InvalidTransition("A cancelled booking cannot be confirmed.")

            extra = {"payment_reference": payment_reference} if payment_reference else {}
            self.store.update_status(booking, BookingStatus.CONFIRMED, **extra)

        logger.info("Booking %s confirmed", booking.id)
        return booking

    def cancel_booking(self, booking_id, acting_user_id):
        """
        Cancel a booking on behalf of its owner.

        Raises:
            NotFound: unknown booking
            Denied: acting user does not own the booking
            InvalidTransition: already cancelled, or the appointment time has passed
        """
        with transaction.atomic():
            booking = self.store.get_for_update(booking_id)
            self.authorizer.authorize(acting_user_id, booking)

            now = self.clock.now()
            if booking.status not in ACTIVE_STATUSES:
                raise InvalidTransition("This booking is already cancelled.")
            if booking.start_time <= now:
                raise InvalidTransition("Past or finished bookings cannot be cancelled.")

            self.store.update_status(booking, BookingStatus.CANCELLED, cancellation_time=now)

        logger.info("Booking %s cancelled by user=%s", booking.id, acting_user_id)
        return booking

    def get_booking(self, booking_id, acting_user_id):
        booking = self.store.get(booking_id)
        self.authorizer.authorize(acting_user_id, booking)
        return booking

    def list_bookings(self, user_id) -> dict:
        """
        A user's bookings grouped by display status, each group ordered by
        start_time.
        """
        now = self.clock.now()
        groups = {"pending": [], "confirmed": [], "finished": [], "cancelled": []}
        for booking in self.store.for_user(user_id):
            status = booking.display_status(now)
            if status == FINISHED:
                groups["finished"].append(booking)
            elif status == BookingStatus.CANCELLED:
                groups["cancelled"].append(booking)
            elif status == BookingStatus.CONFIRMED:
                groups["confirmed"].append(booking)
            else:
                groups["pending"].append(booking)
        return groups
