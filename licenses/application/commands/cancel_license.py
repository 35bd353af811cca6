"""
CancelLicenseCommand.

Command to cancel a license.
"""
import uuid
from dataclasses import dataclass


@dataclass
class CancelLicenseCommand:
    """Command to cancel a license of a brand."""

    brand_id: uuid.UUID
    license_id: uuid.UUID
