# notifications/signals.py
#
# Purpose:
# - Send emails when a Booking's stored status changes.
#   * CONFIRMED: on create (pay-on-site), or when saved with 'status' in update_fields
#   * CANCELLED: on update only
#
# Notes:
# - BookingManager always saves transitions with update_fields, so a repeated
#   (no-op) confirmation never reaches this handler.
# - NotificationService swallows and logs delivery errors; the request that
#   changed the booking never fails because of an email.
#
from django.db.models.signals import post_save
from django.dispatch import receiver

from booking.models import Booking, BookingStatus
from booking.services.notification_service import NotificationService

notifier = NotificationService()


def _status_changed(created: bool, update_fields) -> bool:
    if created:
        return True
    return update_fields is None or "status" in update_fields


@receiver(post_save, sender=Booking)
def booking_status_emails(sender, instance: Booking, created: bool, update_fields=None, **kwargs):
    """
    Send the email matching the booking's new status.
    """
    if not _status_changed(created, update_fields):
        return

    if instance.status == BookingStatus.CONFIRMED:
        notifier.send_confirmation(instance)
    elif instance.status == BookingStatus.CANCELLED and not created:
        notifier.send_cancellation(instance)
