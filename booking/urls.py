# booking/urls.py
#
# Purpose:
# - Expose REST API endpoints for the booking app via DRF router
# - Session auth endpoints (signup/login/logout)
# - Payment provider webhook
#
# Notes for developers:
# - The REST API routes are registered using DefaultRouter.
# - The webhook is a plain Django view (csrf-exempt, signature-verified),
#   not a DRF view, because it must see the raw request body.

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .auth_views import ClientSignupView, ClientLoginView, ClientLogoutView
from .views import BarberViewSet, ServiceViewSet, BookingViewSet
from . import views_payments

# --------------------------
# DRF Router registrations
# --------------------------
router = DefaultRouter()
router.register(r"barbers", BarberViewSet, basename="barber")
router.register(r"services", ServiceViewSet, basename="service")
router.register(r"bookings", BookingViewSet, basename="booking")

# --------------------------
# URL patterns
# --------------------------
urlpatterns = [
    # 1) REST API (JSON): barbers, services, bookings
    path("", include(router.urls)),

    # 2) Auth API (JSON)
    path("auth/signup", ClientSignupView.as_view()),
    path("auth/login", ClientLoginView.as_view()),
    path("auth/logout", ClientLogoutView.as_view()),

    # 3) Payment provider callback
    path("payments/webhook/", views_payments.payment_webhook, name="payment_webhook"),
]
