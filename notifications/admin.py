from django.contrib import admin

from notifications.models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    """Audit trail of booking emails; sent=False marks a failed delivery."""
    list_display = ("user", "booking", "sent", "created_at")
    list_filter = ("sent", "created_at")
    search_fields = ("user__username", "user__email", "message")
    raw_id_fields = ("user", "booking")
