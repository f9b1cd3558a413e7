# notifications/models.py
#
# Purpose:
# - Record messages sent to clients (confirmation/cancellation/reminders).
#
# Design:
# - FK to the auth user that owns the booking, and to the booking itself.
# - 'sent' is the delivery attempt result (False when the email backend failed).
#
from django.conf import settings
from django.db import models


class Notification(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="notifications")
    booking = models.ForeignKey(
        "booking.Booking",
        on_delete=models.CASCADE,
        related_name="notifications",
        null=True,
        blank=True,
    )
    message = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)
    sent = models.BooleanField(default=False)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        label = getattr(self.user, "username", None) or getattr(self.user, "email", "client")
        return f"Notification to {label} at {self.created_at:%Y-%m-%d %H:%M}"
