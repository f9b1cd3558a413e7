"""
NotificationService
-------------------
Purpose:
- Send booking-related emails (confirmation, cancellation, reminders) and keep
  an audit row per message in notifications.Notification.
- In development, Django's console email backend prints the message.

Delivery failures are logged and reported as sent=False on the audit row.
They never propagate: the booking itself is the source of truth and must not
be rolled back because an email could not be delivered.
"""

import logging

from django.conf import settings
from django.core.mail import send_mail
from django.utils import timezone

logger = logging.getLogger(__name__)


def _when(booking) -> str:
    return timezone.localtime(booking.start_time).strftime("%d/%m/%Y at %H:%M")


class NotificationService:
    def _deliver(self, subject: str, body: str, to_email: str) -> bool:
        if not to_email:
            return False
        try:
            send_mail(
                subject=subject,
                message=body,
                from_email=settings.DEFAULT_FROM_EMAIL,
                recipient_list=[to_email],
                fail_silently=False,
            )
            return True
        except Exception:
            logger.exception("Email delivery to %s failed (subject=%r)", to_email, subject)
            return False

    def _record(self, booking, body: str, sent: bool) -> None:
        from notifications.models import Notification

        Notification.objects.create(user=booking.user, booking=booking, message=body, sent=sent)

    def send_confirmation(self, booking) -> None:
        body = (
            f"Hi {booking.user.get_full_name() or booking.user.username},\n\n"
            f"Your appointment is confirmed.\n"
            f"- Booking: {booking.id}\n"
            f"- Barber: {booking.barber.name}\n"
            f"- Service: {booking.service.name}\n"
            f"- Price: {booking.price_cents / 100:.2f} {settings.BOOKING_CURRENCY.upper()}\n"
            f"- Date/Time: {_when(booking)}\n"
        )
        sent = self._deliver("Booking Confirmation", body, booking.user.email)
        self._record(booking, body, sent)

    def send_cancellation(self, booking) -> None:
        body = (
            f"Hi {booking.user.get_full_name() or booking.user.username},\n\n"
            f"Your appointment for {booking.service.name} with {booking.barber.name} "
            f"on {_when(booking)} has been cancelled.\n"
        )
        sent = self._deliver(f"Booking {booking.id} Cancelled", body, booking.user.email)
        self._record(booking, body, sent)

        owner_email = getattr(settings, "EMAIL_HOST_USER", "")
        if owner_email:
            owner_body = (
                f"ALERT: Booking {booking.id} cancelled.\n"
                f"Client: {booking.user.username} ({booking.user.email})\n"
                f"Barber: {booking.barber.name}\n"
                f"Service: {booking.service.name}\n"
                f"Original Time: {_when(booking)}\n"
            )
            self._deliver(f"ALERT: Booking {booking.id} CANCELLED", owner_body, owner_email)

    def send_reminder(self, booking, hours_before: int) -> None:
        body = (
            f"Hi {booking.user.get_full_name() or booking.user.username},\n\n"
            f"This is a reminder of your appointment in about {hours_before} hours.\n"
            f"- Barber: {booking.barber.name}\n"
            f"- Service: {booking.service.name}\n"
            f"- Date/Time: {_when(booking)}\n"
        )
        sent = self._deliver(f"Reminder: appointment in {hours_before}h", body, booking.user.email)
        self._record(booking, body, sent)
