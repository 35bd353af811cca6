"""
License cache service.

Caches the product-facing license key status. Entries are keyed by
license key id and dropped by the cache invalidation event handler
whenever a license or seat of that key changes.

Validity also changes with time alone, so every entry records when it
goes stale: the earliest expiration among the key's valid licenses.
The entry is never served past that moment.
"""
import logging
import uuid
from datetime import datetime
from typing import Optional

from django.conf import settings

from core.infrastructure.cache_adapters import cache_adapter
from licenses.application.dto.license_dto import LicenseKeyStatusDTO

logger = logging.getLogger(__name__)

# Cache TTL (in seconds)
CACHE_TTL_LICENSE_STATUS = 300


def _ttl() -> int:
    return getattr(settings, "LICENSE_STATUS_CACHE_TTL", CACHE_TTL_LICENSE_STATUS)


def status_ttl(now: datetime, stale_at: Optional[datetime]) -> int:
    """
    Seconds a status computed at ``now`` may stay cached.

    Returns:
        The configured TTL, shortened so the entry lapses no later than
        ``stale_at``; 0 when it should not be cached at all.
    """
    if stale_at is None:
        return _ttl()
    remaining = int((stale_at - now).total_seconds())
    if remaining < 1:
        return 0
    return min(_ttl(), remaining)


class LicenseCacheService:
    """Service for caching license-related data."""

    @staticmethod
    def _license_status_key(license_key_id: uuid.UUID) -> str:
        """Generate cache key for license status."""
        return f"license:status:{license_key_id}"

    @staticmethod
    async def get_license_status(
        license_key_id: uuid.UUID, now: datetime
    ) -> Optional[LicenseKeyStatusDTO]:
        """
        Get cached license status.

        Args:
            license_key_id: License key UUID
            now: Current time; entries that went stale by then are ignored

        Returns:
            Cached LicenseKeyStatusDTO or None
        """
        cached = await cache_adapter.get(LicenseCacheService._license_status_key(license_key_id))
        if not isinstance(cached, dict):
            return None
        if not isinstance(cached.get("status"), LicenseKeyStatusDTO):
            return None
        stale_at = cached.get("stale_at")
        if stale_at is not None and now >= stale_at:
            return None
        return cached["status"]

    @staticmethod
    async def set_license_status(
        license_key_id: uuid.UUID,
        status: LicenseKeyStatusDTO,
        now: datetime,
        stale_at: Optional[datetime] = None,
    ) -> None:
        """
        Cache license status.

        Args:
            license_key_id: License key UUID
            status: LicenseKeyStatusDTO to cache
            now: Time the status was computed at
            stale_at: Moment the status stops being true, if any
        """
        ttl = status_ttl(now, stale_at)
        if ttl == 0:
            logger.debug("License status not cached, expires too soon: %s", license_key_id)
            return
        await cache_adapter.set(
            LicenseCacheService._license_status_key(license_key_id),
            {"status": status, "stale_at": stale_at},
            timeout=ttl,
        )

    @staticmethod
    async def invalidate_license_status(license_key_id: uuid.UUID) -> None:
        """
        Invalidate cached license status.

        Args:
            license_key_id: License key UUID
        """
        await cache_adapter.delete(LicenseCacheService._license_status_key(license_key_id))
        logger.debug("Invalidated license status cache: %s", license_key_id)
