"""
ASGI entrypoint for the barbershop booking service.
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "barbershop.settings")

application = get_asgi_application()
