# barbershop/urls.py
#
# Purpose:
# - Project URL router.
# - Keeps the DRF router under /api/ and the Django admin under /admin/.
# - The payment provider webhook lives under /api/payments/ (see booking/urls.py).
#
from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static


urlpatterns = [
    # Django admin (barbers, services, bookings, settings, notifications)
    path("admin/", admin.site.urls),

    # =====
    # API's
    # =====
    path("api/", include("booking.urls")),
]

# Static files in DEBUG (dev only). In production, serve via web server / CDN.
if settings.DEBUG:
    urlpatterns += static(settings.STATIC_URL, document_root=settings.STATIC_ROOT)
