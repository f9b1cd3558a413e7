from django.contrib.auth.models import User
from rest_framework import serializers
from django.utils import timezone
from .models import Barber, Service, Booking, PaymentMethod
from .services.slot_utils import format_slot


class BarberSerializer(serializers.ModelSerializer):
    class Meta:
        model = Barber
        fields = ["id", "name", "description", "address", "image_url", "phones"]


class ServiceSerializer(serializers.ModelSerializer):
    class Meta:
        model = Service
        fields = ["id", "barber", "name", "description", "image_url", "price_cents"]


class AvailabilityQuerySerializer(serializers.Serializer):
    """
    ?date=YYYY-MM-DD. Inputs that include a time ("2025-01-10T13:00") are
    trimmed to the date part.
    """
    date = serializers.CharField()

    def validate_date(self, value):
        raw = value.strip()
        if "T" in raw:
            raw = raw.split("T", 1)[0]
        elif " " in raw:
            raw = raw.split(" ", 1)[0]
        parsed = serializers.DateField().to_internal_value(raw)
        return parsed


class BookingCreateSerializer(serializers.Serializer):
    """
    Input for POST /api/bookings/. Existence, ownership and exclusivity are
    checked by BookingManager, not here.
    """
    barber = serializers.IntegerField()
    service = serializers.IntegerField()
    start_time = serializers.DateTimeField()
    payment_method = serializers.ChoiceField(choices=PaymentMethod.choices, default=PaymentMethod.CARD)


class BookingSerializer(serializers.ModelSerializer):
    barber_name = serializers.CharField(source="barber.name", read_only=True)
    service_name = serializers.CharField(source="service.name", read_only=True)
    display_status = serializers.SerializerMethodField()

    class Meta:
        model = Booking
        fields = [
            "id",
            "barber",
            "barber_name",
            "service",
            "service_name",
            "start_time",
            "status",
            "display_status",
            "payment_method",
            "price_cents",
            "created_at",
            "cancellation_time",
        ]
        read_only_fields = fields

    def get_display_status(self, obj):
        now = self.context.get("now") or timezone.now()
        return obj.display_status(now)


def slots_payload(barber_id, day, slots):
    return {
        "barber": barber_id,
        "date": day.isoformat(),
        "slots": [format_slot(s) for s in slots],
    }


class SignupSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=150)
    password = serializers.CharField(write_only=True)
    name = serializers.CharField(max_length=150)
    email = serializers.EmailField()

    def validate_username(self, value):
        if User.objects.filter(username=value).exists():
            raise serializers.ValidationError("Username already taken.")
        return value

    def validate_email(self, value):
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("Email already used.")
        return value

    def create(self, validated_data):
        return User.objects.create_user(
            username=validated_data["username"],
            password=validated_data["password"],
            email=validated_data["email"],
            first_name=validated_data["name"],
        )


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField(write_only=True)
