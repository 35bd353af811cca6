"""
CreateLicenseCommand and ProvisionLicenseCommand.

Commands that attach licenses to license keys.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass
class CreateLicenseCommand:
    """
    Command to attach one license for a product to an existing key.

    ``max_seats`` of None takes the product's default cap.
    """

    brand_id: uuid.UUID
    license_key_id: uuid.UUID
    product_id: uuid.UUID
    max_seats: Optional[int] = None
    expires_at: Optional[datetime] = None


@dataclass
class ProvisionLicenseCommand:
    """
    Command to provision a license key and licenses in one call.

    This command creates:
    - A license key for the customer
    - One license per requested product on that key
    """

    brand_id: uuid.UUID
    customer_email: str
    product_ids: List[uuid.UUID] = field(default_factory=list)
    expires_at: Optional[datetime] = None
    max_seats: Optional[int] = None
