"""
RenewLicenseCommand.

Command to renew (extend) a license.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class RenewLicenseCommand:
    """Command to renew a license by a number of days or to a target date."""

    brand_id: uuid.UUID
    license_id: uuid.UUID
    days: Optional[int] = None
    expires_at: Optional[datetime] = None
