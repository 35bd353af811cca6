"""
Observability middleware.

This middleware adds correlation ids, structured request logging
and request metrics.
"""

import logging
import time
import uuid
from typing import Callable

from django.http import HttpRequest, HttpResponse

from core.metrics import http_request_duration_seconds, http_requests_total

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


def endpoint_label(request: HttpRequest) -> str:
    """Route pattern of the request, so ids never become label values."""
    match = getattr(request, "resolver_match", None)
    if match is not None and match.route:
        return match.route
    return "unmatched"


class ObservabilityMiddleware:
    """
    Middleware for request observability.

    This middleware:
    1. Reuses or generates a correlation ID per request
    2. Logs request/response information
    3. Records request count and duration
    4. Adds correlation ID to response headers
    """

    def __init__(self, get_response: Callable):
        """Initialize middleware."""
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        """
        Process request and add observability.

        Args:
            request: HTTP request

        Returns:
            HTTP response with observability headers
        """
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        request.correlation_id = correlation_id  # type: ignore

        start_time = time.perf_counter()
        logger.debug(
            "Request started",
            extra={
                "correlation_id": correlation_id,
                "method": request.method,
                "path": request.path,
            },
        )

        try:
            response = self.get_response(request)
        except Exception as exc:
            logger.error(
                "Request failed",
                extra={
                    "correlation_id": correlation_id,
                    "method": request.method,
                    "path": request.path,
                    "error_type": type(exc).__name__,
                },
                exc_info=True,
            )
            raise

        duration = time.perf_counter() - start_time
        endpoint = endpoint_label(request)
        http_requests_total.labels(
            method=request.method, endpoint=endpoint, status_code=response.status_code
        ).inc()
        http_request_duration_seconds.labels(method=request.method, endpoint=endpoint).observe(
            duration
        )
        self._log_response(request, response, correlation_id, duration)
        response[CORRELATION_HEADER] = correlation_id
        return response

    def _log_response(self, request, response, correlation_id, duration):
        """Log structured response information."""
        log_extra = {
            "correlation_id": correlation_id,
            "method": request.method,
            "path": request.path,
            "status_code": response.status_code,
            "duration_ms": round(duration * 1000, 2),
        }
        brand = getattr(request, "brand", None)
        if brand is not None:
            log_extra["brand_id"] = str(brand.id)
        license_key = getattr(request, "license_key", None)
        if license_key is not None:
            log_extra["license_key_id"] = str(license_key.id)

        if response.status_code >= 500:
            logger.error("Request completed with server error", extra=log_extra)
        elif response.status_code >= 400:
            logger.warning("Request completed with client error", extra=log_extra)
        else:
            logger.info("Request completed successfully", extra=log_extra)
