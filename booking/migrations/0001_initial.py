import uuid

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Barber",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("description", models.TextField(blank=True)),
                ("address", models.CharField(blank=True, max_length=255)),
                ("image_url", models.URLField(blank=True)),
                ("phones", models.JSONField(blank=True, default=list)),
                ("active", models.BooleanField(default=True)),
            ],
            options={
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Service",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("description", models.TextField(blank=True)),
                ("image_url", models.URLField(blank=True)),
                (
                    "price_cents",
                    models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)]),
                ),
                ("active", models.BooleanField(default=True)),
                (
                    "barber",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="services",
                        to="booking.barber",
                    ),
                ),
            ],
            options={
                "ordering": ["barber_id", "name"],
            },
        ),
        migrations.CreateModel(
            name="Booking",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("start_time", models.DateTimeField()),
                (
                    "status",
                    models.CharField(
                        choices=[("PENDING", "Pending payment"), ("CONFIRMED", "Confirmed"), ("CANCELLED", "Cancelled")],
                        default="PENDING",
                        help_text="Stored lifecycle status (FINISHED is derived, never stored)",
                        max_length=10,
                    ),
                ),
                (
                    "payment_method",
                    models.CharField(
                        choices=[("CARD", "Card (online checkout)"), ("ON_SITE", "Pay at the barbershop")],
                        default="CARD",
                        max_length=10,
                    ),
                ),
                ("price_cents", models.PositiveIntegerField()),
                (
                    "payment_reference",
                    models.CharField(
                        blank=True,
                        help_text="Checkout session id reported by the payment provider.",
                        max_length=255,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "cancellation_time",
                    models.DateTimeField(
                        blank=True,
                        help_text="When the booking was cancelled (if applicable).",
                        null=True,
                    ),
                ),
                (
                    "barber",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="bookings",
                        to="booking.barber",
                    ),
                ),
                (
                    "service",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="bookings",
                        to="booking.service",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="bookings",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["start_time"],
                "indexes": [
                    models.Index(fields=["barber", "start_time"], name="booking_barber_start_idx"),
                    models.Index(fields=["user", "start_time"], name="booking_user_start_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("status__in", ["PENDING", "CONFIRMED"])),
                        fields=("barber", "start_time"),
                        name="uniq_active_booking_per_barber_slot",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("status", "CANCELLED"), ("cancellation_time__isnull", True), _connector="OR"),
                        name="cancellation_time_only_when_cancelled",
                    ),
                ],
            },
        ),
    ]
