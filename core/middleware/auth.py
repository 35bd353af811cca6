"""
API key authentication middleware.

This middleware validates API keys for brand integration APIs
and license keys for product-facing APIs.
"""

import logging
from typing import Optional

from asgiref.sync import async_to_sync
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.utils.deprecation import MiddlewareMixin

from brands.infrastructure.repositories.django_brand_repository import DjangoBrandRepository
from licenses.infrastructure.repositories.django_license_key_repository import (
    DjangoLicenseKeyRepository,
)

logger = logging.getLogger(__name__)

BRAND_API_PREFIX = "/api/v1/brand/"
PRODUCT_API_PREFIX = "/api/v1/product/"


def unauthorized(message: str) -> JsonResponse:
    return JsonResponse(
        {"error": {"code": "AUTHENTICATION_FAILED", "message": message}},
        status=401,
    )


def _bearer(request: HttpRequest) -> str:
    header = request.headers.get("Authorization", "")
    if header.startswith("Bearer "):
        return header[len("Bearer "):].strip()
    return ""


class APIKeyAuthenticationMiddleware(MiddlewareMixin):
    """
    Middleware for API key authentication.

    This middleware:
    1. Resolves ``X-API-Key`` to an active brand for brand APIs
    2. Resolves ``X-License-Key`` to a license key of an active brand for
       product APIs
    3. Returns 401 Unauthorized if authentication fails

    On success the domain entity is stored as ``request.brand`` or
    ``request.license_key``.
    """

    brand_repository = DjangoBrandRepository()
    license_key_repository = DjangoLicenseKeyRepository()

    def process_request(self, request: HttpRequest) -> Optional[HttpResponse]:
        """
        Process request and validate authentication.

        Args:
            request: HTTP request

        Returns:
            HttpResponse with 401 if authentication fails, None otherwise
        """
        if request.path.startswith(BRAND_API_PREFIX):
            return self._authenticate_brand_api(request)
        if request.path.startswith(PRODUCT_API_PREFIX):
            return self._authenticate_product_api(request)
        return None

    def _authenticate_brand_api(self, request: HttpRequest) -> Optional[HttpResponse]:
        api_key = request.headers.get("X-API-Key") or _bearer(request)
        if not api_key:
            return unauthorized("Missing API key. Provide X-API-Key header.")

        brand = async_to_sync(self.brand_repository.find_by_api_key)(api_key)
        if brand is None:
            logger.warning("Invalid API key attempted: %s...", api_key[:8])
            return unauthorized("Invalid API key")
        if not brand.is_active:
            logger.warning("API key of inactive brand used", extra={"brand_id": str(brand.id)})
            return unauthorized("Brand is inactive")

        request.brand = brand  # type: ignore
        return None

    def _authenticate_product_api(self, request: HttpRequest) -> Optional[HttpResponse]:
        license_key = request.headers.get("X-License-Key") or _bearer(request)
        if not license_key:
            return unauthorized("Missing license key. Provide X-License-Key header.")

        found = async_to_sync(self.license_key_repository.find_by_key)(license_key)
        if found is None:
            logger.warning("Invalid license key attempted: %s...", license_key[:8])
            return unauthorized("Invalid license key")

        brand = async_to_sync(self.brand_repository.find_by_id)(found.brand_id)
        if brand is None or not brand.is_active:
            logger.warning(
                "License key of inactive brand used", extra={"brand_id": str(found.brand_id)}
            )
            return unauthorized("Brand is inactive")

        request.license_key = found  # type: ignore
        return None
