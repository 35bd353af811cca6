"""
ASGI config for the entitlement service project.
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "entitlement_service.settings.prod")

application = get_asgi_application()
