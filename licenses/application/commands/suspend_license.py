"""
SuspendLicenseCommand.

Command to suspend a license.
"""
import uuid
from dataclasses import dataclass


@dataclass
class SuspendLicenseCommand:
    """Command to suspend a license of a brand."""

    brand_id: uuid.UUID
    license_id: uuid.UUID
