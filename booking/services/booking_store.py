"""
booking_store.py
----------------
The Booking Store: every read and write of Booking rows used by the engine
goes through here, so the query shapes the engine depends on are in one place.

Contract:
- get / get_for_update         lookup by id (NotFound if absent)
- active_at                    the active booking occupying a (barber, start_time) key
- in_range                     non-cancelled bookings of a barber within a window
- insert                       create inside a savepoint (no trace left on IntegrityError)
- update_status                persist a status transition
- for_user                     a client's bookings, oldest first

Database errors are not caught here; they propagate to the caller as-is.
"""

from django.core.exceptions import ValidationError
from django.db import transaction

from ..exceptions import NotFound
from ..models import ACTIVE_STATUSES, Booking, BookingStatus


class BookingStore:
    def _queryset(self):
        return Booking.objects.select_related("barber", "service", "user")

    def get(self, booking_id) -> Booking:
        try:
            return self._queryset().get(pk=booking_id)
        except (Booking.DoesNotExist, ValueError, ValidationError):
            # ValueError/ValidationError: malformed UUID
            raise NotFound("Booking not found.")

    def get_for_update(self, booking_id) -> Booking:
        """
        Re-read and lock the row. Must be called inside transaction.atomic.
        """
        try:
            return Booking.objects.select_for_update().get(pk=booking_id)
        except (Booking.DoesNotExist, ValueError, ValidationError):
            raise NotFound("Booking not found.")

    def active_at(self, barber_id, start_time) -> Booking | None:
        return (
            Booking.objects.filter(
                barber_id=barber_id,
                start_time=start_time,
                status__in=ACTIVE_STATUSES,
            )
            .order_by("created_at")
            .first()
        )

    def in_range(self, barber_id, start, end):
        return list(
            Booking.objects.filter(
                barber_id=barber_id,
                start_time__gte=start,
                start_time__lte=end,
            )
            .exclude(status=BookingStatus.CANCELLED)
            .order_by("start_time")
        )

    def insert(self, **fields) -> Booking:
        with transaction.atomic():
            return Booking.objects.create(**fields)

    def update_status(self, booking: Booking, status: str, **extra) -> Booking:
        booking.status = status
        for name, value in extra.items():
            setattr(booking, name, value)
        booking.save(update_fields=["status", *extra.keys()])
        return booking

    def for_user(self, user_id):
        return list(self._queryset().filter(user_id=user_id).order_by("start_time"))
