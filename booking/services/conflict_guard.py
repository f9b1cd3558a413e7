"""
conflict_guard.py
-----------------
Double-booking prevention: at most one active (PENDING/CONFIRMED) booking per
(barber, start_time) key.

How the check-then-insert is made atomic:
1) KeyedLock serializes callers in this process that target the same key.
   Callers on different keys never wait on each other.
2) The partial unique index uniq_active_booking_per_barber_slot rejects a
   second active row written by another process. The IntegrityError is turned
   into Conflict only after re-reading shows the key is really occupied;
   any other integrity failure is re-raised untouched.

A failed reservation never leaves a row behind: the insert runs in its own
savepoint.
"""

import logging
import threading
from contextlib import contextmanager

from django.db import IntegrityError, transaction

from ..exceptions import Conflict, PastTimestamp
from .booking_store import BookingStore
from .clock import SystemClock

logger = logging.getLogger(__name__)


class KeyedLock:
    """
    One mutex per key, created on demand and dropped when no caller holds or
    waits for it.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks = {}  # key -> [lock, users]

    @contextmanager
    def hold(self, key):
        with self._guard:
            entry = self._locks.get(key)
            if entry is None:
                entry = self._locks[key] = [threading.Lock(), 0]
            entry[1] += 1

        lock = entry[0]
        lock.acquire()
        try:
            yield
        finally:
            lock.release()
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[key]

    def __len__(self):
        with self._guard:
            return len(self._locks)


# Shared by every guard in the process so all request handlers serialize on it.
_process_locks = KeyedLock()


class ConflictGuard:
    def __init__(self, store=None, clock=None, locks=None):
        self.store = store or BookingStore()
        self.clock = clock or SystemClock()
        self.locks = locks or _process_locks

    def check_future(self, start_time) -> None:
        if start_time <= self.clock.now():
            raise PastTimestamp()

    def reserve(self, barber_id, start_time, **fields):
        """
        Insert a booking for (barber_id, start_time) if no active booking holds
        the key.

        Raises:
            PastTimestamp: start_time is not strictly after now.
            Conflict: an active booking already occupies the key.
        """
        self.check_future(start_time)

        key = (str(barber_id), start_time.timestamp())
        with self.locks.hold(key):
            with transaction.atomic():
                if self.store.active_at(barber_id, start_time) is not None:
                    logger.info("Slot conflict for barber=%s at %s", barber_id, start_time.isoformat())
                    raise Conflict()
                try:
                    booking = self.store.insert(barber_id=barber_id, start_time=start_time, **fields)
                except IntegrityError:
                    # Another process won the race between our check and insert.
                    if self.store.active_at(barber_id, start_time) is not None:
                        logger.info(
                            "Slot conflict (constraint) for barber=%s at %s",
                            barber_id,
                            start_time.isoformat(),
                        )
                        raise Conflict()
                    raise

        return booking
