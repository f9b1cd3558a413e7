"""
seed_barbershop.py
------------------
Seeds (creates or updates) barbers and their service catalog. You can run
this any time; it upserts barbers by name and services by (barber, name).

Usage:
    python manage.py seed_barbershop
"""

from django.core.management.base import BaseCommand
from django.db import transaction
from booking.models import Barber, Service


CATALOG = [
    {
        "name": "Vintage Barber",
        "address": "Rua das Flores, 123",
        "phones": ["(11) 99999-9999", "(11) 3333-3333"],
        "image_url": "https://images.example.com/barbers/vintage.png",
        "services": [
            {"name": "Corte de Cabelo", "description": "Estilo personalizado com as últimas tendências.", "price_cents": 6000},
            {"name": "Barba",           "description": "Modelagem completa para destacar sua masculinidade.", "price_cents": 4000},
            {"name": "Pézinho",         "description": "Acabamento perfeito para um visual renovado.", "price_cents": 3500},
        ],
    },
    {
        "name": "Corte & Estilo",
        "address": "Avenida Paulista, 1000",
        "phones": ["(11) 98888-7777"],
        "image_url": "https://images.example.com/barbers/corte-estilo.png",
        "services": [
            {"name": "Corte de Cabelo", "description": "Corte clássico na tesoura ou máquina.", "price_cents": 5500},
            {"name": "Sobrancelha",     "description": "Expressão acentuada com modelagem precisa.", "price_cents": 2000},
            {"name": "Hidratação",      "description": "Hidratação profunda para cabelo e barba.", "price_cents": 2500},
        ],
    },
]


class Command(BaseCommand):
    help = "Seed or update barbers and their services (prices in cents)."

    @transaction.atomic
    def handle(self, *args, **options):
        created = 0
        updated = 0

        for item in CATALOG:
            barber, _ = Barber.objects.update_or_create(
                name=item["name"],
                defaults={
                    "address": item["address"],
                    "phones": item["phones"],
                    "image_url": item["image_url"],
                    "active": True,
                },
            )
            for svc in item["services"]:
                _, is_created = Service.objects.update_or_create(
                    barber=barber,
                    name=svc["name"],
                    defaults={
                        "description": svc["description"],
                        "price_cents": svc["price_cents"],
                        "active": True,
                    },
                )
                if is_created:
                    created += 1
                else:
                    updated += 1

        self.stdout.write(self.style.SUCCESS(f"Seed complete. Created={created}, Updated={updated}"))
