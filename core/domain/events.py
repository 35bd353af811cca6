"""
Domain events base classes and infrastructure.

Domain events represent something that happened in the domain.
They are used for decoupling modules and enabling event-driven architecture.
"""

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional
from uuid import UUID

from core.domain.clock import utc_now

_BASE_FIELDS = {"event_id", "occurred_at", "aggregate_id", "event_type"}


def _serialize(value: Any) -> Any:
    if isinstance(value, (uuid.UUID, Enum)):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _serialize(v) for k, v in value.items()}
    return value


@dataclass(frozen=True)
class DomainEvent(ABC):
    """
    Base class for all domain events.

    Domain events are immutable value objects that represent
    something that happened in the domain. Subclasses take their own
    payload arguments and pass the envelope built by ``_envelope``.
    """

    event_id: UUID
    occurred_at: datetime
    aggregate_id: str
    event_type: str

    @classmethod
    def _envelope(cls, aggregate_id: Any, occurred_at: Optional[datetime] = None) -> Dict[str, Any]:
        return {
            "event_id": uuid.uuid4(),
            "occurred_at": occurred_at or utc_now(),
            "aggregate_id": str(aggregate_id),
            "event_type": cls.__name__,
        }

    @property
    def payload(self) -> Dict[str, Any]:
        """Event-specific attributes, serialized to JSON-friendly values."""
        return {
            name: _serialize(value)
            for name, value in vars(self).items()
            if name not in _BASE_FIELDS
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        return {
            "event_id": str(self.event_id),
            "occurred_at": self.occurred_at.isoformat(),
            "aggregate_id": self.aggregate_id,
            "event_type": self.event_type,
            "payload": self.payload,
        }


class EventHandler(ABC):
    """
    Base class for event handlers.

    Event handlers process domain events asynchronously.
    """

    @abstractmethod
    async def handle(self, event: DomainEvent) -> None:
        """
        Handle a domain event.

        Args:
            event: The domain event to handle
        """


class EventBus(ABC):
    """
    Abstract event bus for publishing and subscribing to domain events.
    """

    @abstractmethod
    async def publish(self, event: DomainEvent) -> None:
        """
        Publish a domain event.

        Args:
            event: The domain event to publish
        """

    @abstractmethod
    def subscribe(self, event_type: type, handler: EventHandler) -> None:
        """
        Subscribe to a domain event type.

        Args:
            event_type: The type of event to subscribe to
            handler: The handler to call when event is published
        """
