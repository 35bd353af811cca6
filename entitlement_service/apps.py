"""
App configuration for the entitlement service project.
"""

import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class EntitlementServiceConfig(AppConfig):
    """App configuration for the entitlement service."""

    name = "entitlement_service"
    verbose_name = "Entitlement Service"

    def ready(self):
        """Subscribe the audit, cache and metrics handlers to the event bus."""
        from core.infrastructure.event_handlers import register_event_handlers

        register_event_handlers()
