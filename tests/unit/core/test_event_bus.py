"""
Unit tests for the in-memory event bus and event envelopes.
"""

import uuid
from datetime import datetime, timezone

import pytest

from core.domain.events import EventHandler
from core.infrastructure.event_handlers import action_name, audit_subject
from core.infrastructure.events import InMemoryEventBus
from licenses.domain.events import LicenseRenewed, LicenseStatusChanged, LicenseSuspended


class RecordingHandler(EventHandler):
    def __init__(self):
        self.events = []

    async def handle(self, event):
        self.events.append(event)


class FailingHandler(EventHandler):
    async def handle(self, event):
        raise RuntimeError("handler failed")


def suspended_event():
    return LicenseSuspended(
        license_id=uuid.uuid4(),
        license_key_id=uuid.uuid4(),
        brand_id=uuid.uuid4(),
        previous_status="valid",
    )


class TestInMemoryEventBus:
    """Tests for InMemoryEventBus."""

    @pytest.mark.asyncio
    async def test_dispatch_to_subscribers(self):
        bus = InMemoryEventBus()
        handler = RecordingHandler()
        bus.subscribe(LicenseSuspended, handler)
        event = suspended_event()

        await bus.publish(event)

        assert handler.events == [event]

    @pytest.mark.asyncio
    async def test_base_class_subscribers_receive_subclasses(self):
        bus = InMemoryEventBus()
        handler = RecordingHandler()
        bus.subscribe(LicenseStatusChanged, handler)

        await bus.publish(suspended_event())

        assert len(handler.events) == 1

    @pytest.mark.asyncio
    async def test_handler_called_once_when_subscribed_twice(self):
        bus = InMemoryEventBus()
        handler = RecordingHandler()
        bus.subscribe(LicenseSuspended, handler)
        bus.subscribe(LicenseSuspended, handler)
        bus.subscribe(LicenseStatusChanged, handler)

        await bus.publish(suspended_event())

        assert len(handler.events) == 1

    @pytest.mark.asyncio
    async def test_failing_handler_does_not_stop_others(self):
        bus = InMemoryEventBus()
        handler = RecordingHandler()
        bus.subscribe(LicenseSuspended, FailingHandler())
        bus.subscribe(LicenseSuspended, handler)

        await bus.publish(suspended_event())

        assert len(handler.events) == 1

    @pytest.mark.asyncio
    async def test_publish_without_handlers(self):
        await InMemoryEventBus().publish(suspended_event())

    def test_clear(self):
        bus = InMemoryEventBus()
        bus.subscribe(LicenseSuspended, RecordingHandler())
        bus.clear()
        assert bus.handlers_for(suspended_event()) == []


class TestDomainEvent:
    """Tests for event envelopes and payloads."""

    def test_envelope(self):
        event = suspended_event()

        assert event.event_type == "LicenseSuspended"
        assert event.aggregate_id == str(event.license_id)
        assert event.occurred_at.tzinfo is not None

    def test_to_dict_serializes_payload(self):
        expiration = datetime(2031, 1, 1, tzinfo=timezone.utc)
        event = LicenseRenewed(
            license_id=uuid.uuid4(),
            license_key_id=uuid.uuid4(),
            brand_id=uuid.uuid4(),
            previous_status="suspended",
            previous_expiration=None,
            new_expiration=expiration,
        )

        data = event.to_dict()

        assert data["event_type"] == "LicenseRenewed"
        assert data["payload"]["new_expiration"] == expiration.isoformat()
        assert data["payload"]["previous_expiration"] is None
        assert data["payload"]["license_id"] == str(event.license_id)

    def test_action_name(self):
        assert action_name(suspended_event()) == "license_suspended"

    def test_audit_subject(self):
        event = suspended_event()
        assert audit_subject(event) == ("license", str(event.license_id))
