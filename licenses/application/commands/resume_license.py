"""
ResumeLicenseCommand.

Command to resume a license.
"""
import uuid
from dataclasses import dataclass


@dataclass
class ResumeLicenseCommand:
    """Command to resume a license of a brand."""

    brand_id: uuid.UUID
    license_id: uuid.UUID
