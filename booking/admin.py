from django.contrib import admin
from .models import Barber, Service, Booking

@admin.register(Barber)
class BarberAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "address", "active")
    list_filter = ("active",)
    search_fields = ("name",)

@admin.register(Service)
class ServiceAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "barber", "price_cents", "active")
    list_filter = ("active", "barber")
    search_fields = ("name", "barber__name")
    list_editable = ("price_cents", "active")

@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "barber", "service", "start_time", "status", "payment_method")
    list_filter = ("status", "payment_method", "barber")
    search_fields = ("user__username", "user__email", "service__name")
    # Status changes must go through BookingManager (exclusivity + lifecycle rules).
    readonly_fields = (
        "id", "user", "barber", "service", "start_time", "status", "payment_method",
        "price_cents", "payment_reference", "created_at", "cancellation_time",
    )

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
