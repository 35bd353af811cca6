"""
Cache adapter implementations.

Django cache framework implementation of CachePort. The backend (Redis
or local memory) is chosen in settings.
"""

import logging
from typing import Any, Optional

from asgiref.sync import sync_to_async
from django.core.cache import cache

from core.infrastructure.cache import CachePort
from core.metrics import cache_requests_total

logger = logging.getLogger(__name__)


def _namespace(key: str) -> str:
    return key.split(":", 1)[0]


class DjangoCacheAdapter(CachePort):
    """
    Django cache adapter implementing CachePort.

    Backend errors are logged and reported as a miss.
    """

    async def get(self, key: str) -> Optional[Any]:
        try:
            value = await sync_to_async(cache.get)(key)
        except Exception:  # pylint: disable=broad-exception-caught
            logger.error("Error getting from cache: %s", key, exc_info=True)
            return None
        outcome = "hit" if value is not None else "miss"
        cache_requests_total.labels(namespace=_namespace(key), outcome=outcome).inc()
        logger.debug("Cache %s: %s", outcome, key)
        return value

    async def set(self, key: str, value: Any, timeout: Optional[int] = None) -> None:
        """
        Set a value in cache.

        Args:
            key: Cache key
            value: Value to cache
            timeout: Timeout in seconds
        """
        try:
            await sync_to_async(cache.set)(key, value, timeout=timeout)
        except Exception:  # pylint: disable=broad-exception-caught
            logger.error("Error setting cache: %s", key, exc_info=True)
            return
        logger.debug("Cache set: %s (timeout=%s)", key, timeout)

    async def delete(self, key: str) -> None:
        try:
            await sync_to_async(cache.delete)(key)
        except Exception:  # pylint: disable=broad-exception-caught
            logger.error("Error deleting from cache: %s", key, exc_info=True)
            return
        logger.debug("Cache delete: %s", key)


# Global cache instance
cache_adapter = DjangoCacheAdapter()
