"""
send_reminders.py
-----------------
Email clients ahead of their confirmed appointments.

Usage:
    python manage.py send_reminders --when 24
    python manage.py send_reminders --when 48 --window 5

Meant to be run by cron; each run covers start times within
[now + N hours - window, now + N hours + window]. Only CONFIRMED bookings get
a reminder: PENDING ones are unpaid and CANCELLED ones are gone.
"""

import logging
from datetime import timedelta

from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from booking.models import Booking, BookingStatus
from booking.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Send appointment reminders N hours (24 or 48) before start_time."

    def add_arguments(self, parser):
        parser.add_argument("--when", type=int, choices=[24, 48], required=True, help="Hours before the appointment.")
        parser.add_argument("--window", type=int, default=1, help="Tolerance in minutes around the target time.")

    def handle(self, *args, **options):
        hours = options["when"]
        window = options["window"]
        if window < 0:
            raise CommandError("--window must not be negative.")

        target = timezone.now() + timedelta(hours=hours)
        due = (
            Booking.objects.filter(
                status=BookingStatus.CONFIRMED,
                start_time__range=(target - timedelta(minutes=window), target + timedelta(minutes=window)),
            )
            .select_related("user", "barber", "service")
            .order_by("start_time")
        )

        notifier = NotificationService()
        count = 0
        for booking in due:
            notifier.send_reminder(booking, hours_before=hours)
            count += 1

        logger.info("Reminders for %sh window: %s sent", hours, count)
        self.stdout.write(self.style.SUCCESS(f"Sent {count} reminder(s) for {hours}h window."))
