"""
ActivateLicenseCommand.

Command to claim a seat of a license for a specific instance.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from core.domain.value_objects import InstanceIdentity


@dataclass
class ActivateLicenseCommand:
    """Command to activate a license for an instance."""

    license_key: str
    product_slug: str
    identity: InstanceIdentity
    instance_metadata: Optional[Dict] = None
