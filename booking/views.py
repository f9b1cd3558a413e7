# booking/views.py
#
# Purpose:
# - Read APIs for Barbers and Services.
# - Availability endpoint: free slots for a barber on a date.
# - Booking APIs: create, list (grouped), detail, cancel.
# - Permissions:
#   * Catalog and availability are public.
#   * Everything under /api/bookings/ requires a logged-in user (session auth);
#     the user is passed explicitly into BookingManager, which never looks
#     up the session itself.
#
# Error handling:
# - BookingManager/AvailabilityEngine raise booking.exceptions.*; each view
#   catches BookingError and answers {"detail", "code"} with its status_code.
# - Card bookings: if opening the checkout session fails, the booking stays
#   (PENDING) and the response carries checkout_url = null.
#
import logging

import stripe
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from .exceptions import BookingError, PaymentError
from .models import Barber, Service, PaymentMethod
from .serializers import (
    AvailabilityQuerySerializer,
    BarberSerializer,
    BookingCreateSerializer,
    BookingSerializer,
    ServiceSerializer,
    slots_payload,
)
from .services.availability_engine import AvailabilityEngine
from .services.booking_manager import BookingManager
from .services.payment_gateway import StripePaymentGateway

logger = logging.getLogger(__name__)


def error_response(exc: BookingError) -> Response:
    return Response({"detail": exc.message, "code": exc.code}, status=exc.status_code)


# -------------------- ViewSets --------------------
class BarberViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Endpoints:
    - GET /api/barbers/                               active barbers
    - GET /api/barbers/{id}/                          one barber
    - GET /api/barbers/{id}/availability/?date=...    free slots that day
    """
    queryset = Barber.objects.filter(active=True).order_by("name")
    serializer_class = BarberSerializer
    engine = AvailabilityEngine()

    @action(detail=True, methods=["get"], url_path="availability")
    def availability(self, request, pk=None):
        """
        GET /api/barbers/{id}/availability/?date=YYYY-MM-DD
        Also accepts inputs that include time; we trim to the date part.
        Slots already past (today) are not returned.
        """
        query = AvailabilityQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return Response(
                {"detail": "Missing or invalid 'date'. Use YYYY-MM-DD.", "code": "invalid_date"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        day = query.validated_data["date"]

        try:
            slots = self.engine.available_slots(pk, day)
        except BookingError as e:
            return error_response(e)

        return Response(slots_payload(int(pk), day, slots))


class ServiceViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Service catalog (active services of active barbers).
    Optional filter: ?barber=<id>
    """
    serializer_class = ServiceSerializer

    def get_queryset(self):
        qs = Service.objects.filter(active=True, barber__active=True).order_by("barber_id", "name")
        barber_id = (self.request.query_params.get("barber") or "").strip()
        if barber_id.isdigit():
            qs = qs.filter(barber_id=int(barber_id))
        return qs


class BookingViewSet(viewsets.ViewSet):
    """
    Endpoints:
    - GET    /api/bookings/               my bookings grouped by display status
    - POST   /api/bookings/               create
    - GET    /api/bookings/{id}/          detail (owner only)
    - POST   /api/bookings/{id}/cancel/   cancel (owner only, future bookings)
    """
    permission_classes = [IsAuthenticated]
    manager = BookingManager()

    def _serialize(self, booking, many=False):
        return BookingSerializer(booking, many=many, context={"now": self.manager.clock.now()}).data

    def list(self, request):
        groups = self.manager.list_bookings(request.user.pk)
        return Response({name: self._serialize(items, many=True) for name, items in groups.items()})

    def create(self, request):
        """
        Create a booking for the logged-in user.
        - CARD: booking is PENDING; a checkout session is opened and its URL
          returned as checkout_url. The payment webhook confirms it later.
        - ON_SITE: booking is CONFIRMED immediately.
        """
        payload = BookingCreateSerializer(data=request.data)
        payload.is_valid(raise_exception=True)
        data = payload.validated_data

        try:
            booking = self.manager.create_booking(
                user_id=request.user.pk,
                barber_id=data["barber"],
                service_id=data["service"],
                start_time=data["start_time"],
                payment_method=data["payment_method"],
            )
        except BookingError as e:
            return error_response(e)

        checkout_url = None
        if booking.payment_method == PaymentMethod.CARD:
            try:
                session = StripePaymentGateway().start_checkout(booking)
            except (PaymentError, stripe.StripeError):
                # The booking exists regardless; the client can retry payment.
                logger.exception("Could not open checkout for booking %s", booking.id)
            else:
                checkout_url = session.url
                booking.payment_reference = session.session_id
                booking.save(update_fields=["payment_reference"])

        out = dict(self._serialize(booking))
        out["checkout_url"] = checkout_url
        return Response(out, status=status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        try:
            booking = self.manager.get_booking(pk, request.user.pk)
        except BookingError as e:
            return error_response(e)
        return Response(self._serialize(booking))

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):
        """
        Cancel a booking. Only the owner may cancel, and only before its start time.
        """
        try:
            booking = self.manager.cancel_booking(pk, request.user.pk)
        except BookingError as e:
            return error_response(e)
        return Response(self._serialize(booking), status=status.HTTP_200_OK)
