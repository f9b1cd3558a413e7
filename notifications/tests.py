from datetime import date
from unittest import mock

from django.core import mail
from django.test import TestCase, override_settings

from booking.models import Booking, BookingStatus, PaymentMethod
from booking.services.booking_manager import BookingManager
from booking.services.clock import FixedClock
from booking.services.slot_utils import SlotCatalog
from booking.tests.helpers import at, aware, make_barber, make_service, make_user
from notifications.models import Notification


@override_settings(EMAIL_HOST_USER="")
class NotificationTests(TestCase):

    def setUp(self):
        self.user = make_user("joao", first_name="João")
        barber = make_barber()
        self.service = make_service(barber)
        self.manager = BookingManager(
            clock=FixedClock(aware(2030, 5, 10, 9, 0)),
            catalog=SlotCatalog(["10:00", "10:30"]),
        )
        self.slot = at(date(2030, 5, 12), "10:00")

    def book(self, payment_method):
        return self.manager.create_booking(
            self.user.pk, self.service.barber_id, self.service.pk, self.slot, payment_method
        )

    def test_email_sent_when_booking_confirmed_on_site(self):
        booking = self.book(PaymentMethod.ON_SITE)

        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ["joao@example.com"])
        self.assertIn("confirmed", mail.outbox[0].body)
        self.assertIn("10:00", mail.outbox[0].body)
        note = Notification.objects.get()
        self.assertEqual(note.booking_id, booking.id)
        self.assertTrue(note.sent)

    def test_card_booking_emails_only_after_payment(self):
        booking = self.book(PaymentMethod.CARD)
        self.assertEqual(len(mail.outbox), 0)

        self.manager.confirm_payment(booking.id)
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].subject, "Booking Confirmation")

        # A repeated confirmation saves nothing and sends nothing.
        self.manager.confirm_payment(booking.id)
        self.assertEqual(len(mail.outbox), 1)

    def test_email_sent_when_booking_cancelled(self):
        booking = self.book(PaymentMethod.CARD)
        self.manager.cancel_booking(booking.id, self.user.pk)

        self.assertEqual(len(mail.outbox), 1)
        self.assertIn("Cancelled", mail.outbox[0].subject)
        self.assertIn("cancelled", mail.outbox[0].body)

    @override_settings(EMAIL_HOST_USER="owner@barbershop.local")
    def test_owner_alerted_on_cancellation(self):
        booking = self.book(PaymentMethod.CARD)
        self.manager.cancel_booking(booking.id, self.user.pk)

        self.assertEqual([m.to for m in mail.outbox], [["joao@example.com"], ["owner@barbershop.local"]])
        self.assertTrue(mail.outbox[1].subject.startswith("ALERT"))

    def test_delivery_failure_does_not_undo_booking(self):
        with mock.patch(
            "booking.services.notification_service.send_mail", side_effect=ConnectionRefusedError("smtp down")
        ):
            with self.assertLogs("booking.services.notification_service", level="ERROR"):
                booking = self.book(PaymentMethod.ON_SITE)

        self.assertEqual(Booking.objects.get(pk=booking.id).status, BookingStatus.CONFIRMED)
        note = Notification.objects.get()
        self.assertFalse(note.sent)
