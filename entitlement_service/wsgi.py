"""
WSGI config for the entitlement service project.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "entitlement_service.settings.prod")

application = get_wsgi_application()
