from datetime import date, time

from django.test import TestCase, override_settings
from django.utils import timezone

from configmgr.models import SystemSetting
from booking.services.slot_utils import (
    SlotCatalog,
    date_to_range,
    default_catalog,
    format_slot,
    generate_slot_catalog,
    get_business_hours,
    parse_hhmm,
)


class SlotCatalogTests(TestCase):
    def test_default_catalog_covers_business_hours_inclusive(self):
        catalog = default_catalog()
        labels = [format_slot(s) for s in catalog]

        self.assertEqual(len(labels), 19)
        self.assertEqual(labels[0], "09:00")
        self.assertEqual(labels[1], "09:30")
        self.assertEqual(labels[-1], "18:00")

    def test_generate_with_custom_interval(self):
        catalog = generate_slot_catalog(time(9, 0), time(10, 0), 20)
        self.assertEqual([format_slot(s) for s in catalog], ["09:00", "09:20", "09:40", "10:00"])

    def test_generate_rejects_non_positive_interval(self):
        with self.assertRaises(ValueError):
            generate_slot_catalog(time(9, 0), time(10, 0), 0)

    def test_catalog_keeps_configured_order_and_drops_duplicates(self):
        catalog = SlotCatalog(["10:00", "09:00", "09:30", "09:00"])
        self.assertEqual(catalog.slots(), [time(10, 0), time(9, 0), time(9, 30)])
        self.assertTrue(catalog.contains(time(9, 30)))
        self.assertFalse(catalog.contains(time(9, 15)))

    def test_parse_hhmm(self):
        self.assertEqual(parse_hhmm(" 07:45 "), time(7, 45))
        with self.assertRaises(ValueError):
            parse_hhmm("7h45")


class BusinessHoursTests(TestCase):
    @override_settings(BOOKING_BUSINESS_OPEN="08:00", BOOKING_BUSINESS_CLOSE="12:00", BOOKING_SLOT_INTERVAL_MINUTES=60)
    def test_settings_defaults(self):
        self.assertEqual(get_business_hours(), (time(8, 0), time(12, 0), 60))
        self.assertEqual(len(default_catalog()), 5)

    def test_system_setting_overrides_defaults(self):
        SystemSetting.objects.create(key="BUSINESS_OPEN", value="10:00")
        SystemSetting.objects.create(key="BUSINESS_CLOSE", value="11:00")
        SystemSetting.objects.create(key="SLOT_INTERVAL_MINUTES", value="15")

        labels = [format_slot(s) for s in default_catalog()]
        self.assertEqual(labels, ["10:00", "10:15", "10:30", "10:45", "11:00"])

    def test_malformed_system_settings_are_ignored(self):
        SystemSetting.objects.create(key="BUSINESS_OPEN", value="ten")
        SystemSetting.objects.create(key="BUSINESS_CLOSE", value="11:00")
        SystemSetting.objects.create(key="SLOT_INTERVAL_MINUTES", value="-5")

        with self.assertLogs("booking.services.slot_utils", level="WARNING"):
            open_time, close_time, interval = get_business_hours()

        self.assertEqual((open_time, close_time, interval), (time(9, 0), time(18, 0), 30))


class DateRangeTests(TestCase):
    def test_date_to_range_covers_whole_local_day(self):
        start, end = date_to_range("2030-05-10")
        tz = timezone.get_current_timezone()

        self.assertTrue(timezone.is_aware(start))
        self.assertEqual(timezone.localtime(start, tz).date(), date(2030, 5, 10))
        self.assertEqual(timezone.localtime(start, tz).time(), time(0, 0))
        self.assertEqual(timezone.localtime(end, tz).date(), date(2030, 5, 10))
        self.assertEqual(timezone.localtime(end, tz).time().hour, 23)

    def test_date_to_range_accepts_date_objects(self):
        self.assertEqual(date_to_range(date(2030, 5, 10)), date_to_range("2030-05-10"))
