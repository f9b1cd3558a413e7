"""
slot_utils.py
-------------
The slot catalog: the fixed sequence of bookable times of day, plus helpers
to turn a calendar date into a timezone-aware day window.

Business hours come from configmgr.SystemSetting (BUSINESS_OPEN,
BUSINESS_CLOSE, SLOT_INTERVAL_MINUTES) when present, otherwise from
settings.BOOKING_* defaults (09:00–18:00, every 30 minutes).
"""

import logging
from datetime import date, datetime, time, timedelta

from django.conf import settings
from django.utils import timezone

logger = logging.getLogger(__name__)


def parse_hhmm(value: str) -> time:
    h, m = value.strip().split(":")
    return time(int(h), int(m))


def format_slot(slot: time) -> str:
    return slot.strftime("%H:%M")


class SlotCatalog:
    """
    Duplicate-free sequence of time-of-day values, kept in the order it was
    configured (generate_slot_catalog yields chronological order).
    """

    def __init__(self, slots):
        seen = set()
        ordered = []
        for slot in slots:
            if isinstance(slot, str):
                slot = parse_hhmm(slot)
            slot = slot.replace(second=0, microsecond=0)
            if slot in seen:
                continue
            seen.add(slot)
            ordered.append(slot)
        self._slots = tuple(ordered)

    def slots(self) -> list[time]:
        return list(self._slots)

    def contains(self, value: time) -> bool:
        return value in self._slots

    def __iter__(self):
        return iter(self._slots)

    def __len__(self):
        return len(self._slots)

    def __repr__(self):
        return f"SlotCatalog({[format_slot(s) for s in self._slots]})"


def generate_slot_catalog(open_time: time, close_time: time, interval_minutes: int) -> SlotCatalog:
    """
    Every `interval_minutes` from open_time through close_time (inclusive).
    """
    if interval_minutes <= 0:
        raise ValueError("interval_minutes must be positive")

    step = timedelta(minutes=interval_minutes)
    anchor = datetime.combine(date.min, open_time)
    end = datetime.combine(date.min, close_time)

    slots = []
    current = anchor
    while current <= end:
        slots.append(current.time())
        current += step
    return SlotCatalog(slots)


def _setting_value(key: str):
    from configmgr.models import SystemSetting

    return SystemSetting.value_for(key)


def get_business_hours():
    """
    Return (open_time, close_time, interval_minutes).
    Runtime SystemSetting rows win over the settings defaults; malformed
    rows are logged and ignored.
    """
    default_open = parse_hhmm(settings.BOOKING_BUSINESS_OPEN)
    default_close = parse_hhmm(settings.BOOKING_BUSINESS_CLOSE)
    default_interval = int(settings.BOOKING_SLOT_INTERVAL_MINUTES)

    open_raw = _setting_value("BUSINESS_OPEN")
    close_raw = _setting_value("BUSINESS_CLOSE")
    interval_raw = _setting_value("SLOT_INTERVAL_MINUTES")

    open_time, close_time = default_open, default_close
    if open_raw and close_raw:
        try:
            open_time, close_time = parse_hhmm(open_raw), parse_hhmm(close_raw)
        except ValueError:
            logger.warning("Ignoring malformed business hours %r-%r", open_raw, close_raw)
            open_time, close_time = default_open, default_close

    interval = default_interval
    if interval_raw:
        try:
            interval = int(interval_raw)
            if interval <= 0:
                raise ValueError(interval_raw)
        except ValueError:
            logger.warning("Ignoring malformed slot interval %r", interval_raw)
            interval = default_interval

    return open_time, close_time, interval


def default_catalog() -> SlotCatalog:
    open_time, close_time, interval = get_business_hours()
    return generate_slot_catalog(open_time, close_time, interval)


def _make_aware(dt_naive: datetime):
    """
    Convert a naive datetime to an aware one using Django's current timezone.
    """
    if timezone.is_aware(dt_naive):
        return dt_naive
    return timezone.make_aware(dt_naive, timezone.get_current_timezone())


def combine(day: date, slot: time) -> datetime:
    """Aware datetime for `slot` on `day` in the current timezone."""
    return _make_aware(datetime.combine(day, slot))


def date_to_range(day):
    """
    Convert a date (or 'YYYY-MM-DD') into an aware day window
    [start_of_day, end_of_day], both inclusive.
    """
    if isinstance(day, str):
        y, m, d = map(int, day.strip().split("-"))
        day = date(y, m, d)
    elif isinstance(day, datetime):
        day = day.date()

    day_start = _make_aware(datetime.combine(day, time.min))
    day_end = _make_aware(datetime.combine(day, time.max))
    return day_start, day_end
