from datetime import date, time

from django.test import TestCase

from booking.exceptions import NotFound
from booking.models import Booking, BookingStatus
from booking.services.availability_engine import AvailabilityEngine
from booking.services.clock import FixedClock
from booking.services.slot_utils import SlotCatalog

from .helpers import at, aware, make_barber, make_service, make_user


class AvailabilityEngineTests(TestCase):
    """
    Free slots for a barber on a date: catalog minus active bookings,
    minus slots already past when the date is today.
    """

    def setUp(self):
        self.barber = make_barber()
        self.other_barber = make_barber(name="Corte & Estilo")
        self.service = make_service(self.barber)
        self.other_service = make_service(self.other_barber)
        self.user = make_user()
        self.clock = FixedClock(aware(2030, 5, 10, 9, 15))
        self.catalog = SlotCatalog(["09:00", "09:30", "10:00"])
        self.engine = AvailabilityEngine(clock=self.clock, catalog=self.catalog)
        self.future_day = date(2030, 5, 12)

    def _book(self, start_time, status=BookingStatus.CONFIRMED, barber=None, service=None):
        return Booking.objects.create(
            user=self.user,
            barber=barber or self.barber,
            service=service or self.service,
            start_time=start_time,
            status=status,
            price_cents=6000,
        )

    def test_empty_store_returns_whole_catalog(self):
        slots = self.engine.available_slots(self.barber.id, self.future_day)
        self.assertEqual(slots, [time(9, 0), time(9, 30), time(10, 0)])

    def test_today_drops_slots_not_after_now(self):
        # now = 09:15 on the queried day
        slots = self.engine.available_slots(self.barber.id, date(2030, 5, 10))
        self.assertEqual(slots, [time(9, 30), time(10, 0)])

    def test_slot_exactly_at_now_is_dropped(self):
        self.clock.set(aware(2030, 5, 10, 9, 30))
        slots = self.engine.available_slots(self.barber.id, date(2030, 5, 10))
        self.assertEqual(slots, [time(10, 0)])

    def test_past_day_has_no_slots(self):
        self.assertEqual(self.engine.available_slots(self.barber.id, date(2030, 5, 9)), [])

    def test_active_bookings_occupy_slots(self):
        self._book(at(self.future_day, "09:00"), status=BookingStatus.PENDING)
        self._book(at(self.future_day, "10:00"), status=BookingStatus.CONFIRMED)

        slots = self.engine.available_slots(self.barber.id, self.future_day)
        self.assertEqual(slots, [time(9, 30)])

    def test_cancelled_booking_frees_slot(self):
        self._book(at(self.future_day, "09:30"), status=BookingStatus.CANCELLED)
        slots = self.engine.available_slots(self.barber.id, self.future_day)
        self.assertIn(time(9, 30), slots)

    def test_other_barber_and_other_day_do_not_interfere(self):
        self._book(at(self.future_day, "09:00"), barber=self.other_barber, service=self.other_service)
        self._book(at(date(2030, 5, 13), "09:30"))

        slots = self.engine.available_slots(self.barber.id, self.future_day)
        self.assertEqual(slots, [time(9, 0), time(9, 30), time(10, 0)])

    def test_fully_booked_is_empty_not_error(self):
        for label in ("09:00", "09:30", "10:00"):
            self._book(at(self.future_day, label))
        self.assertEqual(self.engine.available_slots(self.barber.id, self.future_day), [])

    def test_unknown_or_inactive_barber(self):
        with self.assertRaises(NotFound):
            self.engine.available_slots(999999, self.future_day)

        self.barber.active = False
        self.barber.save()
        with self.assertRaises(NotFound):
            self.engine.available_slots(self.barber.id, self.future_day)

    def test_read_has_no_side_effects(self):
        self._book(at(self.future_day, "09:00"))
        before = list(Booking.objects.values_list("id", "status"))

        self.engine.available_slots(self.barber.id, self.future_day)

        self.assertEqual(list(Booking.objects.values_list("id", "status")), before)

    def test_result_follows_catalog_order(self):
        engine = AvailabilityEngine(clock=self.clock, catalog=SlotCatalog(["10:00", "09:00", "09:30"]))
        self._book(at(self.future_day, "09:00"))

        slots = engine.available_slots(self.barber.id, self.future_day)
        self.assertEqual(slots, [time(10, 0), time(9, 30)])
