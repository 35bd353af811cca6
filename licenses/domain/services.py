"""
License domain services.

Domain services contain business logic that doesn't naturally
fit within a single entity.
"""
from datetime import datetime
from typing import Dict, Iterable, Optional

from core.domain.clock import utc_now
from core.domain.value_objects import LicenseStatus
from licenses.domain.license import License

OVERALL_INACTIVE = "inactive"
OVERALL_PARTIALLY_SUSPENDED = "partially_suspended"
OVERALL_PARTIALLY_CANCELLED = "partially_cancelled"
OVERALL_NO_VALID_LICENSES = "no_valid_licenses"
OVERALL_ACTIVE = "active"


class LicenseStatusEvaluator:
    """Domain service deriving aggregate statuses from a set of licenses."""

    @staticmethod
    def overall_status(
        key_is_active: bool,
        licenses: Iterable[License],
        current_time: Optional[datetime] = None,
    ) -> str:
        """
        Compute the overall status of a license key.

        The first matching rule wins: inactive key, any suspended
        license, any cancelled license, no usable license, active.

        Args:
            key_is_active: Active flag of the license key
            licenses: Licenses held by the key
            current_time: Current time (defaults to now)

        Returns:
            One of the OVERALL_* constants
        """
        if not key_is_active:
            return OVERALL_INACTIVE
        licenses = list(licenses)
        statuses = {license.status for license in licenses}
        if LicenseStatus.SUSPENDED in statuses:
            return OVERALL_PARTIALLY_SUSPENDED
        if LicenseStatus.CANCELLED in statuses:
            return OVERALL_PARTIALLY_CANCELLED
        now = current_time or utc_now()
        if not any(license.is_valid(now) for license in licenses):
            return OVERALL_NO_VALID_LICENSES
        return OVERALL_ACTIVE

    @staticmethod
    def count_by_state(
        licenses: Iterable[License], current_time: Optional[datetime] = None
    ) -> Dict[str, int]:
        """
        Count licenses per effective state.

        ``active`` means usable now; ``expired`` means status VALID but
        past expiration.

        Returns:
            Dict with total_active, total_suspended, total_cancelled
            and total_expired
        """
        now = current_time or utc_now()
        counts = {
            "total_active": 0,
            "total_suspended": 0,
            "total_cancelled": 0,
            "total_expired": 0,
        }
        for license in licenses:
            if license.status == LicenseStatus.SUSPENDED:
                counts["total_suspended"] += 1
            elif license.status == LicenseStatus.CANCELLED:
                counts["total_cancelled"] += 1
            elif license.is_expired(now):
                counts["total_expired"] += 1
            else:
                counts["total_active"] += 1
        return counts
