"""
WSGI entrypoint for the barbershop booking service.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "barbershop.settings")

application = get_wsgi_application()
