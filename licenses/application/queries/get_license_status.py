"""
GetLicenseKeyStatusQuery.

Query to get the status and entitlements of a license key.
"""
from dataclasses import dataclass


@dataclass
class GetLicenseKeyStatusQuery:
    """Query to get license status for a raw license key."""

    license_key: str
