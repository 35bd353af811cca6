"""
Brand and catalog commands.
"""
import uuid
from dataclasses import dataclass
from typing import Optional


@dataclass
class CreateBrandCommand:
    """Command to register a brand and issue its first API key."""

    name: str
    slug: str


@dataclass
class SetBrandActiveCommand:
    """Command to activate or deactivate a brand."""

    brand_id: uuid.UUID
    is_active: bool


@dataclass
class RotateApiKeyCommand:
    """Command to revoke a brand's API keys and issue a new one."""

    brand_id: uuid.UUID


@dataclass
class CreateProductCommand:
    """Command to add a product to a brand's catalog."""

    brand_id: uuid.UUID
    name: str
    slug: str
    max_seats: Optional[int] = None
    description: str = ""
