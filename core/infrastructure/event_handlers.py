"""
Event handlers for domain events.

These handlers process domain events for side effects: the audit
trail, cache invalidation and business metrics.
"""

import logging
import re
from typing import Optional, Tuple

from asgiref.sync import sync_to_async

from activations.domain.events import (
    ActivationsExpired,
    LicenseActivated,
    SeatDeactivated,
    SeatsForceDeactivated,
)
from brands.domain.events import ApiKeyRotated, BrandActiveChanged, BrandCreated, ProductCreated
from core.domain.events import DomainEvent, EventHandler
from core.infrastructure.events import event_bus
from core.metrics import (
    license_keys_created_total,
    license_transitions_total,
    licenses_created_total,
    seat_activations_total,
    seat_deactivations_total,
)
from licenses.domain.events import (
    LicenseCreated,
    LicenseKeyCreated,
    LicenseKeyUpdated,
    LicenseStatusChanged,
)

logger = logging.getLogger(__name__)

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def action_name(event: DomainEvent) -> str:
    """``LicenseSuspended`` -> ``license_suspended``."""
    return _CAMEL_BOUNDARY.sub("_", event.event_type).lower()


def audit_subject(event: DomainEvent) -> Tuple[str, str]:
    """Entity type and id an event is recorded against."""
    if isinstance(event, (LicenseActivated, SeatDeactivated)):
        return "activation", str(event.activation_id)
    if isinstance(event, (LicenseKeyCreated, LicenseKeyUpdated)):
        return "license_key", str(event.license_key_id)
    if isinstance(event, ProductCreated):
        return "product", str(event.product_id)
    if isinstance(event, (BrandCreated, BrandActiveChanged, ApiKeyRotated)):
        return "brand", str(event.brand_id)
    return "license", event.aggregate_id


class AuditLogEventHandler(EventHandler):
    """
    Event handler for audit logging.

    Writes one AuditLog row per event and a structured log line.
    """

    def __init__(self, actor: str = "system"):
        self.actor = actor

    def _write(self, event: DomainEvent) -> None:
        from licenses.infrastructure.models import AuditLog

        entity_type, entity_id = audit_subject(event)
        brand_id: Optional[str] = getattr(event, "brand_id", None)
        # pylint: disable=no-member
        AuditLog.objects.get_or_create(
            event_id=event.event_id,
            defaults={
                "brand_id": brand_id,
                "entity_type": entity_type,
                "entity_id": entity_id,
                "action": action_name(event),
                "changes": event.payload,
                "actor": self.actor,
                "created_at": event.occurred_at,
            },
        )

    async def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event for audit logging.

        Args:
            event: Domain event to log
        """
        logger.info(
            "Audit log: %s - %s",
            event.event_type,
            event.aggregate_id,
            extra={
                "event_id": str(event.event_id),
                "event_type": event.event_type,
                "aggregate_id": event.aggregate_id,
                "occurred_at": event.occurred_at.isoformat(),
                "payload": event.payload,
            },
        )
        await sync_to_async(self._write)(event)


class LicenseCacheInvalidationHandler(EventHandler):
    """
    Event handler for cache invalidation.

    Every license and seat event carries its license key id, which is
    the key of the cached status.
    """

    async def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event for cache invalidation.

        Args:
            event: Domain event
        """
        from licenses.application.services.license_cache_service import LicenseCacheService

        license_key_id = getattr(event, "license_key_id", None)
        if license_key_id is None:
            return
        await LicenseCacheService.invalidate_license_status(license_key_id)


class MetricsEventHandler(EventHandler):
    """Event handler feeding business counters."""

    async def handle(self, event: DomainEvent) -> None:
        brand = str(getattr(event, "brand_id", ""))
        if isinstance(event, LicenseKeyCreated):
            license_keys_created_total.labels(brand_id=brand).inc()
        elif isinstance(event, LicenseCreated):
            licenses_created_total.labels(brand_id=brand).inc()
        elif isinstance(event, LicenseStatusChanged):
            transition = action_name(event).replace("license_", "", 1)
            license_transitions_total.labels(brand_id=brand, transition=transition).inc()
        elif isinstance(event, LicenseActivated):
            kind = "reactivation" if event.reactivated else "new"
            seat_activations_total.labels(brand_id=brand, kind=kind).inc()
        elif isinstance(event, SeatDeactivated):
            seat_deactivations_total.labels(brand_id=brand, kind="instance").inc()
        elif isinstance(event, SeatsForceDeactivated):
            seat_deactivations_total.labels(brand_id=brand, kind="forced").inc(
                event.deactivated_count
            )
        elif isinstance(event, ActivationsExpired):
            seat_deactivations_total.labels(brand_id=brand, kind="expired").inc(
                event.expired_count
            )


audit_handler = AuditLogEventHandler()
cache_handler = LicenseCacheInvalidationHandler()
metrics_handler = MetricsEventHandler()

AUDITED_EVENTS = (
    BrandCreated,
    BrandActiveChanged,
    ApiKeyRotated,
    ProductCreated,
    LicenseKeyCreated,
    LicenseKeyUpdated,
    LicenseCreated,
    LicenseStatusChanged,
    LicenseActivated,
    SeatDeactivated,
    SeatsForceDeactivated,
    ActivationsExpired,
)

CACHE_EVENTS = (
    LicenseKeyUpdated,
    LicenseCreated,
    LicenseStatusChanged,
    LicenseActivated,
    SeatDeactivated,
    SeatsForceDeactivated,
    ActivationsExpired,
)


def register_event_handlers(bus=None):
    """Register all event handlers with the event bus."""
    bus = bus or event_bus
    for event_type in AUDITED_EVENTS:
        bus.subscribe(event_type, audit_handler)
        bus.subscribe(event_type, metrics_handler)
    for event_type in CACHE_EVENTS:
        bus.subscribe(event_type, cache_handler)
    logger.info("Event handlers registered")
