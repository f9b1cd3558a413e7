# booking/views_payments.py
#
# Purpose:
# - Payment provider callback: POST /api/payments/webhook/
#
# Behavior:
# - Verifies the Stripe signature (400 on failure, so forged calls are rejected).
# - checkout.session.completed (paid) and
#   checkout.session.async_payment_succeeded -> BookingManager.confirm_payment
# - Any other event is acknowledged and ignored. A PENDING booking that never
#   gets paid stays PENDING; expiring it is not handled here.
# - Domain errors (unknown booking, booking already cancelled) are logged and
#   answered 200: retrying would never succeed. Database errors propagate as 500
#   so the provider retries the delivery.
#
import logging

from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

from .exceptions import BookingError, PaymentConfigurationError, PaymentVerificationError
from .services.booking_manager import BookingManager
from .services.payment_gateway import StripePaymentGateway

logger = logging.getLogger(__name__)

CONFIRMING_EVENTS = {"checkout.session.completed", "checkout.session.async_payment_succeeded"}

manager = BookingManager()


@csrf_exempt
@require_http_methods(["POST"])
def payment_webhook(request):
    signature = request.META.get("HTTP_STRIPE_SIGNATURE", "")

    try:
        event = StripePaymentGateway().parse_webhook(request.body, signature)
    except PaymentVerificationError as e:
        return JsonResponse({"ok": False, "message": str(e)}, status=400)
    except PaymentConfigurationError:
        logger.error("Payment webhook called but STRIPE_WEBHOOK_SECRET is not set")
        return JsonResponse({"ok": False, "message": "Webhook not configured."}, status=503)

    event_type = event["type"]
    session = event["data"]["object"]

    if event_type not in CONFIRMING_EVENTS:
        logger.info("Ignoring payment event %s", event_type)
        return JsonResponse({"ok": True, "ignored": event_type})

    if event_type == "checkout.session.completed" and session.get("payment_status") != "paid":
        # Async methods report completion first and success later.
        logger.info("Checkout %s completed but not paid yet", session.get("id"))
        return JsonResponse({"ok": True, "ignored": event_type})

    metadata = session.get("metadata") or {}
    booking_id = metadata.get("booking_id") or session.get("client_reference_id")
    if not booking_id:
        logger.warning("Payment event %s without booking_id (session %s)", event_type, session.get("id"))
        return JsonResponse({"ok": False, "message": "Missing booking reference."})

    try:
        booking = manager.confirm_payment(booking_id, payment_reference=session.get("id") or "")
    except BookingError as e:
        logger.warning("Payment for booking %s not applied: %s", booking_id, e.message)
        return JsonResponse({"ok": False, "code": e.code, "message": e.message})

    return JsonResponse({"ok": True, "booking": str(booking.id), "status": booking.status})
