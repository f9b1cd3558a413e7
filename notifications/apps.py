from django.apps import AppConfig


class NotificationsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "notifications"
    verbose_name = "Booking notifications"

    def ready(self):
        # post_save handlers on booking.Booking
        from . import signals  # noqa: F401
