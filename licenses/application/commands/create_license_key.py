"""
CreateLicenseKeyCommand.

Command to issue a new license key to a customer.
"""
import uuid
from dataclasses import dataclass


@dataclass
class CreateLicenseKeyCommand:
    """Command to create an empty license key for a customer email."""

    brand_id: uuid.UUID
    customer_email: str
