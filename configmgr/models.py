from django.db import models


class SystemSetting(models.Model):
    """
    Runtime key/value settings, editable in the admin.
    Keys read by the slot catalog (booking/services/slot_utils.py):
      - BUSINESS_OPEN          first bookable slot, 'HH:MM' (e.g. '09:00')
      - BUSINESS_CLOSE         last bookable slot, 'HH:MM' (e.g. '18:00')
      - SLOT_INTERVAL_MINUTES  minutes between slots (e.g. '30')
    A missing key falls back to the BOOKING_* value in settings.py.
    """
    key = models.CharField(max_length=100, unique=True)
    value = models.CharField(max_length=200)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["key"]

    def __str__(self):
        return f"{self.key}={self.value}"

    @classmethod
    def value_for(cls, key: str):
        """Raw stored value for key, or None when the key is not set."""
        return cls.objects.filter(key=key).values_list("value", flat=True).first()
