# booking/models.py
#
# Purpose:
# - Core domain models for the barbershop booking engine.
#
# Design highlights:
# - Barber: the bookable resource. Its primary key is the partition key for
#   double-booking prevention; everything else is display data.
# - Service: belongs to exactly one Barber; price is stored in cents (integer).
# - Booking:
#   • Records owner (auth User), barber, service and an exact, slot-aligned start_time
#   • status is uppercase "PENDING", "CONFIRMED" or "CANCELLED"
#   • "FINISHED" is never stored: it is derived at read time (see display_status)
#   • cancellation_time is set iff the booking is cancelled
#   • price_cents is a snapshot of the service price at creation time
#
# Notes for developers:
# - Double-booking prevention has two layers:
#   1) ConflictGuard serializes check-then-insert per (barber, start_time) key.
#   2) The partial UniqueConstraint below rejects a second active row for the
#      same key at the database level (covers multiple processes/workers).
# - Bookings are never deleted. Cancelling only flips the status, which also
#   drops the row out of the partial unique index and frees the slot.
#
import uuid

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Q


# -------------------------
# Barber (bookable resource)
# -------------------------
class Barber(models.Model):
    """
    A barber that clients book appointments with.
    - phones is an ordered list of contact numbers (first one is the primary).
    - active controls visibility and bookability.
    """
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    address = models.CharField(max_length=255, blank=True)
    image_url = models.URLField(blank=True)
    phones = models.JSONField(default=list, blank=True)
    active = models.BooleanField(default=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name


# -------------------------
# Service catalog item
# -------------------------
class Service(models.Model):
    """
    A service offered by one barber.

    Rules:
    - price_cents must be >= 1 (integer minor currency units, never float)
    - active controls visibility and bookability
    """
    barber = models.ForeignKey(Barber, on_delete=models.CASCADE, related_name="services")
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    image_url = models.URLField(blank=True)
    price_cents = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    active = models.BooleanField(default=True)

    class Meta:
        ordering = ["barber_id", "name"]

    def __str__(self):
        return f"{self.name} ({self.price_cents / 100:.2f})"


class BookingStatus(models.TextChoices):
    PENDING = "PENDING", "Pending payment"
    CONFIRMED = "CONFIRMED", "Confirmed"
    CANCELLED = "CANCELLED", "Cancelled"


# Read-time only; never written to Booking.status.
FINISHED = "FINISHED"

ACTIVE_STATUSES = (BookingStatus.PENDING, BookingStatus.CONFIRMED)


class PaymentMethod(models.TextChoices):
    CARD = "CARD", "Card (online checkout)"
    ON_SITE = "ON_SITE", "Pay at the barbershop"


# -------------------------
# Booking record
# -------------------------
class Booking(models.Model):
    """
    Appointment booking.

    Lifecycle:
    - PENDING    card payment started, waiting for the payment provider
    - CONFIRMED  paid (or pay-on-site); becomes FINISHED once start_time passes
    - CANCELLED  terminal; frees the slot for new bookings
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="bookings",
    )
    barber = models.ForeignKey(Barber, on_delete=models.PROTECT, related_name="bookings")
    service = models.ForeignKey(Service, on_delete=models.PROTECT, related_name="bookings")
    start_time = models.DateTimeField()
    status = models.CharField(
        max_length=10,
        choices=BookingStatus.choices,
        default=BookingStatus.PENDING,
        help_text="Stored lifecycle status (FINISHED is derived, never stored)",
    )
    payment_method = models.CharField(
        max_length=10,
        choices=PaymentMethod.choices,
        default=PaymentMethod.CARD,
    )
    price_cents = models.PositiveIntegerField()
    payment_reference = models.CharField(
        max_length=255,
        blank=True,
        help_text="Checkout session id reported by the payment provider.",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    cancellation_time = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the booking was cancelled (if applicable).",
    )

    class Meta:
        ordering = ["start_time"]
        constraints = [
            models.UniqueConstraint(
                fields=["barber", "start_time"],
                condition=Q(status__in=["PENDING", "CONFIRMED"]),
                name="uniq_active_booking_per_barber_slot",
            ),
            models.CheckConstraint(
                condition=Q(status="CANCELLED") | Q(cancellation_time__isnull=True),
                name="cancellation_time_only_when_cancelled",
            ),
        ]
        indexes = [
            models.Index(fields=["barber", "start_time"], name="booking_barber_start_idx"),
            models.Index(fields=["user", "start_time"], name="booking_user_start_idx"),
        ]

    def __str__(self):
        return f"{self.user} → {self.service.name} with {self.barber.name} on {self.start_time}"

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    def display_status(self, now) -> str:
        """
        Status as shown to clients: a confirmed booking whose start_time is at
        or before `now` is FINISHED. Cancelled wins over everything.
        """
        if self.status == BookingStatus.CONFIRMED and self.start_time <= now:
            return FINISHED
        return self.status
