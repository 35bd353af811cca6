"""
UpdateLicenseKeyCommand.

Command to change the owner email or the active flag of a license key.
"""
import uuid
from dataclasses import dataclass
from typing import Optional


@dataclass
class UpdateLicenseKeyCommand:
    """Command to update a license key. Fields left as None are unchanged."""

    brand_id: uuid.UUID
    license_key_id: uuid.UUID
    customer_email: Optional[str] = None
    is_active: Optional[bool] = None
