"""
GetLicenseKeyStatusHandler.

Handler for the product-facing license key status query.
"""
import logging
from typing import Dict, List

from activations.domain.services import SeatManager, usage_percentage
from activations.ports.activation_repository import ActivationRepository
from brands.ports.product_repository import ProductRepository
from core.domain.clock import utc_now
from core.domain.exceptions import LicenseKeyNotFoundError
from licenses.application.dto.license_dto import (
    ActiveInstanceDTO,
    EntitlementDTO,
    KeySeatUsageDTO,
    LicenseKeyDTO,
    LicenseKeyStatusDTO,
    ProductSeatUsageDTO,
)
from licenses.application.queries.get_license_status import GetLicenseKeyStatusQuery
from licenses.application.services.license_cache_service import LicenseCacheService
from licenses.domain.services import OVERALL_ACTIVE, LicenseStatusEvaluator
from licenses.ports.license_key_repository import LicenseKeyRepository
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


class GetLicenseKeyStatusHandler:
    """Handler for GetLicenseKeyStatusQuery."""

    def __init__(
        self,
        license_key_repository: LicenseKeyRepository,
        license_repository: LicenseRepository,
        product_repository: ProductRepository,
        activation_repository: ActivationRepository,
    ):
        """Initialize handler with repositories."""
        self.license_key_repository = license_key_repository
        self.license_repository = license_repository
        self.product_repository = product_repository
        self.activation_repository = activation_repository

    async def handle(self, query: GetLicenseKeyStatusQuery) -> LicenseKeyStatusDTO:
        """
        Handle get license key status query.

        The result is cached per license key and dropped whenever a
        license or seat of the key changes, or when the first of its
        valid licenses expires.

        Args:
            query: GetLicenseKeyStatusQuery

        Returns:
            LicenseKeyStatusDTO with overall status, entitlements and seats

        Raises:
            LicenseKeyNotFoundError: If the license key does not exist
        """
        license_key = await self.license_key_repository.find_by_key(query.license_key)
        if license_key is None:
            raise LicenseKeyNotFoundError("Invalid license key")

        now = utc_now()
        cached = await LicenseCacheService.get_license_status(license_key.id, now)
        if cached is not None:
            return cached

        licenses = await self.license_repository.find_by_license_key(license_key.id)
        products = {
            product.id: product
            for product in await self.product_repository.find_many(
                list({license.product_id for license in licenses})
            )
        }

        entitlements: List[EntitlementDTO] = []
        product_rows: List[ProductSeatUsageDTO] = []
        total_seats = 0
        used_seats = 0
        for license in licenses:
            if not license.is_valid(now):
                continue
            product = products.get(license.product_id)
            active = await self.activation_repository.find_active_by_license(license.id)
            usage = SeatManager.seat_usage(license, active)

            capped_total = license.max_seats if license.supports_seats else 0
            total_seats += capped_total
            used_seats += usage.used

            entitlements.append(
                EntitlementDTO(
                    product_id=license.product_id,
                    product_slug=str(product.slug) if product else "",
                    product_name=product.name if product else "",
                    product_description=product.description if product else "",
                    license_id=license.id,
                    status=license.status.value,
                    expires_at=license.expires_at,
                    max_seats=license.max_seats,
                    supports_seats=license.supports_seats,
                    seats_total=license.max_seats,
                    seats_used=usage.used,
                    seats_available=usage.available if license.supports_seats else None,
                    usage_percentage=usage.usage_percentage if license.supports_seats else None,
                    activations=[ActiveInstanceDTO.from_entity(a) for a in active],
                )
            )
            product_rows.append(
                ProductSeatUsageDTO(
                    product_slug=str(product.slug) if product else "",
                    product_name=product.name if product else "",
                    total=capped_total,
                    used=usage.used,
                    available=usage.available if license.supports_seats else None,
                )
            )

        overall = LicenseStatusEvaluator.overall_status(license_key.is_active, licenses, now)
        summary: Dict[str, int] = {
            "total_products": len(licenses),
            "active_licenses": len(entitlements),
            "total_seats": total_seats,
            "used_seats": used_seats,
        }
        status = LicenseKeyStatusDTO(
            license_key=LicenseKeyDTO.from_entity(license_key),
            overall_status=overall,
            is_valid=overall == OVERALL_ACTIVE,
            entitlements=entitlements,
            seat_usage=KeySeatUsageDTO(
                total_seats=total_seats,
                used_seats=used_seats,
                available_seats=max(0, total_seats - used_seats),
                usage_percentage=usage_percentage(used_seats, total_seats),
                products=product_rows,
            ),
            summary=summary,
        )

        stale_at = min(
            (lic.expires_at for lic in licenses if lic.is_valid(now) and lic.expires_at),
            default=None,
        )
        await LicenseCacheService.set_license_status(license_key.id, status, now, stale_at)
        logger.debug(
            "License key status computed",
            extra={"license_key_id": str(license_key.id), "overall_status": overall},
        )
        return status
