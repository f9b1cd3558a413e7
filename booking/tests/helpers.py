import hashlib
import hmac
import time as time_module
from datetime import datetime, time

from django.contrib.auth.models import User
from django.utils import timezone

from booking.models import Barber, Service


def aware(year, month, day, hour=0, minute=0):
    return timezone.make_aware(datetime(year, month, day, hour, minute), timezone.get_current_timezone())


def at(day, hhmm: str):
    h, m = hhmm.split(":")
    return timezone.make_aware(datetime.combine(day, time(int(h), int(m))), timezone.get_current_timezone())


def make_user(username="joao", **kwargs):
    kwargs.setdefault("email", f"{username}@example.com")
    return User.objects.create_user(username=username, password="testpass123", **kwargs)


def make_barber(name="Vintage Barber", **kwargs):
    kwargs.setdefault("phones", ["(11) 99999-9999"])
    return Barber.objects.create(name=name, **kwargs)


def make_service(barber, name="Corte de Cabelo", price_cents=6000, **kwargs):
    return Service.objects.create(barber=barber, name=name, price_cents=price_cents, **kwargs)


def stripe_signature(payload: bytes, secret: str, timestamp=None) -> str:
    """Stripe-Signature header value for payload, signed the way Stripe signs webhooks."""
    timestamp = int(time_module.time()) if timestamp is None else timestamp
    signed = f"{timestamp}.".encode("utf-8") + payload
    digest = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={digest}"
