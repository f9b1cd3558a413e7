"""
clock.py
--------
Time source for the booking engine. Services take a clock in their
constructor so tests can pin "now" instead of patching timezone.now.
"""

from datetime import datetime, timedelta

from django.utils import timezone


class SystemClock:
    def now(self) -> datetime:
        return timezone.now()


class FixedClock:
    """
    A clock that always returns the same aware instant until advanced.
    """

    def __init__(self, instant: datetime):
        if timezone.is_naive(instant):
            instant = timezone.make_aware(instant, timezone.get_current_timezone())
        self._instant = instant

    def now(self) -> datetime:
        return self._instant

    def advance(self, **kwargs) -> datetime:
        self._instant = self._instant + timedelta(**kwargs)
        return self._instant

    def set(self, instant: datetime) -> None:
        if timezone.is_naive(instant):
            instant = timezone.make_aware(instant, timezone.get_current_timezone())
        self._instant = instant
