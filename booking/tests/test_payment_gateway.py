import json
from datetime import date
from unittest import mock

import stripe
from django.test import TestCase

from booking.exceptions import PaymentConfigurationError, PaymentVerificationError
from booking.models import Booking, BookingStatus
from booking.services.payment_gateway import StripePaymentGateway

from .helpers import at, make_barber, make_service, make_user, stripe_signature


class StripePaymentGatewayTests(TestCase):
    def setUp(self):
        barber = make_barber()
        service = make_service(barber, price_cents=6000)
        self.booking = Booking.objects.create(
            user=make_user(),
            barber=barber,
            service=service,
            start_time=at(date(2030, 5, 12), "14:30"),
            status=BookingStatus.PENDING,
            price_cents=6000,
        )
        self.gateway = StripePaymentGateway(
            secret_key="sk_test_123", webhook_secret="whsec_test", currency="brl", base_url="https://agenda.test/"
        )

    def test_describe(self):
        self.assertEqual(self.gateway.describe(self.booking), "Vintage Barber - Corte de Cabelo em 12/05/2030 14:30")

    @mock.patch("stripe.checkout.Session.create")
    def test_start_checkout_sends_booking_reference(self, create):
        create.return_value = mock.Mock(id="cs_test_1", url="https://checkout.stripe.test/cs_test_1")

        session = self.gateway.start_checkout(self.booking)

        self.assertEqual(session.session_id, "cs_test_1")
        self.assertEqual(session.url, "https://checkout.stripe.test/cs_test_1")
        kwargs = create.call_args.kwargs
        self.assertEqual(kwargs["api_key"], "sk_test_123")
        self.assertEqual(kwargs["mode"], "payment")
        self.assertEqual(kwargs["client_reference_id"], str(self.booking.id))
        self.assertEqual(kwargs["metadata"]["booking_id"], str(self.booking.id))
        self.assertEqual(kwargs["metadata"]["barber_id"], str(self.booking.barber_id))
        self.assertEqual(kwargs["success_url"], "https://agenda.test/bookings")
        price_data = kwargs["line_items"][0]["price_data"]
        self.assertEqual(price_data["unit_amount"], 6000)
        self.assertEqual(price_data["currency"], "brl")

    def test_start_checkout_without_key(self):
        gateway = StripePaymentGateway(secret_key="", webhook_secret="whsec_test")
        with self.assertRaises(PaymentConfigurationError):
            gateway.start_checkout(self.booking)

    def test_parse_webhook_without_secret(self):
        gateway = StripePaymentGateway(secret_key="sk_test_123", webhook_secret="")
        with self.assertRaises(PaymentConfigurationError):
            gateway.parse_webhook(b"{}", "t=1,v1=x")

    @mock.patch("stripe.Webhook.construct_event")
    def test_parse_webhook_rejects_bad_signature(self, construct_event):
        construct_event.side_effect = stripe.SignatureVerificationError("No signatures found", "t=1,v1=x")
        with self.assertRaises(PaymentVerificationError):
            self.gateway.parse_webhook(b"{}", "t=1,v1=x")

    @mock.patch("stripe.Webhook.construct_event")
    def test_parse_webhook_rejects_malformed_payload(self, construct_event):
        construct_event.side_effect = ValueError("Invalid payload")
        with self.assertRaises(PaymentVerificationError):
            self.gateway.parse_webhook(b"not json", "t=1,v1=x")

    def test_parse_webhook_returns_plain_dict_for_signed_event(self):
        payload = json.dumps({
            "id": "evt_test_1",
            "object": "event",
            "type": "checkout.session.completed",
            "data": {"object": {"id": "cs_test_1", "object": "checkout.session", "metadata": {"booking_id": "abc"}}},
        }).encode("utf-8")

        event = self.gateway.parse_webhook(payload, stripe_signature(payload, "whsec_test"))

        self.assertIsInstance(event, dict)
        self.assertEqual(event["type"], "checkout.session.completed")
        self.assertEqual(event["data"]["object"].get("metadata"), {"booking_id": "abc"})

    def test_parse_webhook_rejects_payload_signed_with_other_secret(self):
        payload = b'{"id": "evt_test_1", "object": "event", "type": "checkout.session.completed"}'
        with self.assertRaises(PaymentVerificationError):
            self.gateway.parse_webhook(payload, stripe_signature(payload, "whsec_other"))
