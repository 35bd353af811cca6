"""
Value objects for the domain.

Value objects are immutable objects that are defined by their attributes
rather than their identity. They have no identity and are compared by value.
"""
import re
from abc import ABC
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from core.domain.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_SLUG_RE = re.compile(r"^[a-z0-9]+(?:[-_][a-z0-9]+)*$")

MAX_EMAIL_LENGTH = 255
MAX_INSTANCE_ID_LENGTH = 255
MAX_INSTANCE_URL_LENGTH = 500
MAX_MACHINE_ID_LENGTH = 255


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects.

    Value objects are immutable and compared by value.
    """

    def __eq__(self, other):
        """Compare value objects by their attributes."""
        if not isinstance(other, self.__class__):
            return False
        return self.__dict__ == other.__dict__

    def __hash__(self):
        """Make value objects hashable."""
        return hash(tuple(sorted((k, str(v)) for k, v in self.__dict__.items())))


@dataclass(frozen=True)
class Email(ValueObject):
    """Customer email. Identifies a customer across brands by value only."""

    value: str

    def __post_init__(self):
        """Validate email format."""
        value = (self.value or "").strip()
        if not value or len(value) > MAX_EMAIL_LENGTH or not _EMAIL_RE.match(value):
            raise ValidationError(f"Invalid email address: {self.value}")
        object.__setattr__(self, "value", value)

    def __str__(self) -> str:
        """Return email as string."""
        return self.value


@dataclass(frozen=True)
class Slug(ValueObject):
    """Lowercase URL-safe identifier."""

    value: str

    def __post_init__(self):
        """Validate slug format."""
        if not self.value:
            raise ValidationError(f"{self.__class__.__name__} cannot be empty")
        if len(self.value) > 100 or not _SLUG_RE.match(self.value):
            raise ValidationError(f"Invalid slug format: {self.value}")

    def __str__(self) -> str:
        """Return slug as string."""
        return self.value


class BrandSlug(Slug):
    """Brand slug, unique across the service."""


class ProductSlug(Slug):
    """Product slug, unique within its brand only."""


class LicenseStatus(Enum):
    """
    Stored license status.

    Expiry by time is not a status: it is derived from ``expires_at`` by
    ``License.is_valid``.
    """

    VALID = "valid"
    SUSPENDED = "suspended"
    CANCELLED = "cancelled"

    def __str__(self) -> str:
        """Return status as string."""
        return self.value

    @property
    def label(self) -> str:
        return self.value.capitalize()


class ActivationStatus(Enum):
    """Activation status. Only ACTIVE consumes a seat."""

    ACTIVE = "active"
    DEACTIVATED = "deactivated"
    EXPIRED = "expired"

    def __str__(self) -> str:
        """Return status as string."""
        return self.value

    @property
    def label(self) -> str:
        return self.value.capitalize()


class InstanceType(Enum):
    """Kind of running instance that claims a seat."""

    WORDPRESS = "wordpress"
    MACHINE = "machine"
    CLI = "cli"
    APP = "app"

    def __str__(self) -> str:
        """Return instance type as string."""
        return self.value


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass(frozen=True)
class InstanceIdentity(ValueObject):
    """
    Identity of the instance claiming a seat.

    ``instance_id``, ``instance_url`` and ``machine_id`` form the identity
    tuple; at least one of them is required. ``instance_type`` only
    describes the instance and never takes part in matching.
    """

    instance_id: Optional[str] = None
    instance_url: Optional[str] = None
    machine_id: Optional[str] = None
    instance_type: Optional[InstanceType] = None

    def __post_init__(self):
        """Normalize blank fields and validate lengths."""
        object.__setattr__(self, "instance_id", _clean(self.instance_id))
        object.__setattr__(self, "instance_url", _clean(self.instance_url))
        object.__setattr__(self, "machine_id", _clean(self.machine_id))
        if isinstance(self.instance_type, str):
            try:
                object.__setattr__(self, "instance_type", InstanceType(self.instance_type))
            except ValueError as exc:
                raise ValidationError(f"Unknown instance type: {self.instance_type}") from exc

        if not (self.instance_id or self.instance_url or self.machine_id):
            raise ValidationError(
                "Instance identifier is required (instance_id, instance_url or machine_id)"
            )
        if self.instance_id and len(self.instance_id) > MAX_INSTANCE_ID_LENGTH:
            raise ValidationError("Instance ID too long")
        if self.instance_url and len(self.instance_url) > MAX_INSTANCE_URL_LENGTH:
            raise ValidationError("Instance URL too long")
        if self.machine_id and len(self.machine_id) > MAX_MACHINE_ID_LENGTH:
            raise ValidationError("Machine ID too long")

    def lookup_fields(self) -> Dict[str, str]:
        """
        Fields used to find an existing activation for this identity.

        Only the fields the caller supplied are returned, so a lookup by
        ``instance_id`` alone never matches a row that only has a
        ``machine_id``.

        Returns:
            Mapping of supplied identity field name to value
        """
        fields = {
            "instance_id": self.instance_id,
            "instance_url": self.instance_url,
            "machine_id": self.machine_id,
        }
        return {name: value for name, value in fields.items() if value}

    def matches(self, other: "InstanceIdentity") -> bool:
        """
        Check whether ``other`` satisfies this identity used as a lookup.

        Args:
            other: Stored identity

        Returns:
            True if every supplied field equals the stored one
        """
        return all(getattr(other, name) == value for name, value in self.lookup_fields().items())

    def __str__(self) -> str:
        """Return the most specific identifier as string."""
        return self.instance_id or self.instance_url or self.machine_id
