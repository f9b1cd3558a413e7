"""
payment_gateway.py
------------------
Stripe Checkout integration for card bookings.

Flow:
1) BookingManager creates the booking as PENDING.
2) start_checkout() opens a Checkout Session carrying the booking id in its
   metadata and returns the redirect URL for the client.
3) Stripe calls our webhook; parse_webhook() verifies the signature and
   views_payments hands checkout.session.completed to
   BookingManager.confirm_payment().

The gateway never changes booking state itself.
"""

import json
import logging
from dataclasses import dataclass

import stripe
from django.conf import settings
from django.utils import timezone

from ..exceptions import PaymentConfigurationError, PaymentVerificationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckoutSession:
    session_id: str
    url: str | None


class StripePaymentGateway:
    def __init__(self, secret_key=None, webhook_secret=None, currency=None, base_url=None):
        self.secret_key = secret_key if secret_key is not None else settings.STRIPE_SECRET_KEY
        self.webhook_secret = (
            webhook_secret if webhook_secret is not None else settings.STRIPE_WEBHOOK_SECRET
        )
        self.currency = currency or settings.BOOKING_CURRENCY
        self.base_url = (base_url or settings.BOOKING_BASE_URL).rstrip("/")

    def _require_secret_key(self) -> str:
        if not self.secret_key:
            raise PaymentConfigurationError("Stripe secret key is not configured.")
        return self.secret_key

    def describe(self, booking) -> str:
        local_start = timezone.localtime(booking.start_time)
        return f"{booking.barber.name} - {booking.service.name} em {local_start:%d/%m/%Y %H:%M}"

    def start_checkout(self, booking, success_url=None, cancel_url=None) -> CheckoutSession:
        """
        Create a Checkout Session for a PENDING booking and return its id and URL.
        """
        api_key = self._require_secret_key()

        line_item = {
            "price_data": {
                "currency": self.currency,
                "unit_amount": booking.price_cents,
                "product_data": {
                    "name": self.describe(booking),
                    "description": booking.service.description or booking.service.name,
                },
            },
            "quantity": 1,
        }
        if booking.service.image_url:
            line_item["price_data"]["product_data"]["images"] = [booking.service.image_url]

        session = stripe.checkout.Session.create(
            api_key=api_key,
            payment_method_types=["card"],
            mode="payment",
            success_url=success_url or f"{self.base_url}/bookings",
            cancel_url=cancel_url or f"{self.base_url}/",
            client_reference_id=str(booking.id),
            metadata={
                "booking_id": str(booking.id),
                "barber_id": str(booking.barber_id),
                "service_id": str(booking.service_id),
                "user_id": str(booking.user_id),
                "start_time": booking.start_time.isoformat(),
            },
            line_items=[line_item],
        )
        logger.info("Checkout session %s opened for booking %s", session.id, booking.id)
        return CheckoutSession(session_id=session.id, url=session.url)

    def parse_webhook(self, payload: bytes, signature: str) -> dict:
        """
        Verify a webhook call and return the event as a plain dict.

        construct_event is used for verification only; the event handed back
        is the verified payload decoded with json.

        Raises:
            PaymentConfigurationError: webhook secret missing
            PaymentVerificationError: bad signature or malformed payload
        """
        if not self.webhook_secret:
            raise PaymentConfigurationError("Stripe webhook secret is not configured.")
        try:
            stripe.Webhook.construct_event(payload, signature, self.webhook_secret)
        except stripe.SignatureVerificationError as e:
            logger.warning("Invalid webhook signature: %s", e)
            raise PaymentVerificationError("Invalid webhook signature") from e
        except ValueError as e:
            logger.warning("Invalid webhook payload: %s", e)
            raise PaymentVerificationError("Invalid webhook payload") from e

        if isinstance(payload, bytes):
            payload = payload.decode("utf-8")
        return json.loads(payload)
