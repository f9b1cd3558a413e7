"""
availability_engine.py
----------------------
Computes which catalog slots are still free for a barber on a given day.

Rules:
1) a slot is occupied if a non-cancelled booking (PENDING or CONFIRMED)
   starts at that time of day for this barber;
2) on the current day, only slots strictly after the current time remain;
3) days before today have no free slots.

Pure read: no locks are taken. The result may be stale by the time the
client books; ConflictGuard resolves that race at creation time.
"""

from datetime import date, datetime

from django.utils import timezone

from ..exceptions import NotFound
from ..models import Barber
from .booking_store import BookingStore
from .clock import SystemClock
from .slot_utils import date_to_range, default_catalog


class AvailabilityEngine:
    def __init__(self, store=None, clock=None, catalog=None):
        self.store = store or BookingStore()
        self.clock = clock or SystemClock()
        # None means "read business hours on every call"
        self._catalog = catalog

    def catalog(self):
        return self._catalog if self._catalog is not None else default_catalog()

    def _require_barber(self, barber_id) -> Barber:
        try:
            barber = Barber.objects.filter(pk=barber_id, active=True).first()
        except (ValueError, TypeError):
            barber = None
        if barber is None:
            raise NotFound("Barber not found.")
        return barber

    def occupied_times(self, barber_id, day: date) -> set:
        day_start, day_end = date_to_range(day)
        tz = timezone.get_current_timezone()
        return {
            timezone.localtime(b.start_time, tz).time().replace(second=0, microsecond=0)
            for b in self.store.in_range(barber_id, day_start, day_end)
        }

    def available_slots(self, barber_id, day: date):
        """
        Return the free slots (datetime.time) for `barber_id` on `day`,
        in catalog order.
        """
        if isinstance(day, datetime):
            day = day.date()

        self._require_barber(barber_id)

        local_now = timezone.localtime(self.clock.now(), timezone.get_current_timezone())
        today = local_now.date()
        if day < today:
            return []

        occupied = self.occupied_times(barber_id, day)
        free = [slot for slot in self.catalog() if slot not in occupied]

        if day == today:
            now_time = local_now.time()
            free = [slot for slot in free if slot > now_time]

        return free
