"""
Brand license read handlers.
"""
from typing import Dict, List, Optional

from activations.ports.activation_repository import ActivationRepository
from brands.ports.product_repository import ProductRepository
from core.domain.clock import utc_now
from core.domain.exceptions import ValidationError
from core.domain.value_objects import LicenseStatus
from licenses.application.dto.license_dto import (
    BrandLicenseSummaryDTO,
    LicenseDTO,
    LicenseListDTO,
)
from licenses.application.queries.brand_license_queries import (
    GetLicenseQuery,
    ListBrandLicensesQuery,
)
from licenses.application.services.ownership import require_license
from licenses.domain.license import License
from licenses.ports.license_repository import LicenseRepository


def parse_status(value: Optional[str]) -> Optional[LicenseStatus]:
    """
    Parse a status filter.

    Raises:
        ValidationError: If the value is not a stored license status
    """
    if not value:
        return None
    try:
        return LicenseStatus(value.lower())
    except ValueError as exc:
        allowed = ", ".join(status.value for status in LicenseStatus)
        raise ValidationError(f"Invalid status '{value}'. Allowed: {allowed}") from exc


def summarize(licenses: List[License]) -> BrandLicenseSummaryDTO:
    now = utc_now()
    by_status: Dict[str, int] = {status.value: 0 for status in LicenseStatus}
    expired = 0
    for license in licenses:
        by_status[license.status.value] += 1
        if license.status == LicenseStatus.VALID and license.is_expired(now):
            expired += 1
    return BrandLicenseSummaryDTO(total=len(licenses), by_status=by_status, expired=expired)


class ListBrandLicensesHandler:
    """Handler for ListBrandLicensesQuery."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        product_repository: ProductRepository,
        activation_repository: ActivationRepository,
    ):
        """Initialize handler with repositories."""
        self.license_repository = license_repository
        self.product_repository = product_repository
        self.activation_repository = activation_repository

    async def handle(self, query: ListBrandLicensesQuery) -> LicenseListDTO:
        """
        List a brand's licenses, newest first, with a status summary.

        The summary always covers every license of the brand, whatever
        filters were applied to the list.

        Args:
            query: ListBrandLicensesQuery

        Returns:
            LicenseListDTO

        Raises:
            ValidationError: If the status filter is unknown
        """
        status = parse_status(query.status)
        licenses = await self.license_repository.list_by_brand(
            query.brand_id, status=status, product_slug=query.product_slug
        )
        if status is None and not query.product_slug:
            every_license = licenses
        else:
            every_license = await self.license_repository.list_by_brand(query.brand_id)

        products = {
            product.id: product
            for product in await self.product_repository.list_by_brand(query.brand_id)
        }
        seats = await self.activation_repository.count_active_by_licenses(
            [license.id for license in licenses]
        )
        return LicenseListDTO(
            licenses=[
                LicenseDTO.from_entity(
                    license, products.get(license.product_id), seats.get(license.id, 0)
                )
                for license in licenses
            ],
            summary=summarize(every_license),
        )


class GetLicenseHandler:
    """Handler for GetLicenseQuery."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        product_repository: ProductRepository,
        activation_repository: ActivationRepository,
    ):
        """Initialize handler with repositories."""
        self.license_repository = license_repository
        self.product_repository = product_repository
        self.activation_repository = activation_repository

    async def handle(self, query: GetLicenseQuery) -> LicenseDTO:
        license = await require_license(self.license_repository, query.brand_id, query.license_id)
        product = await self.product_repository.find_by_id(query.brand_id, license.product_id)
        seats = await self.activation_repository.count_active_by_licenses([license.id])
        return LicenseDTO.from_entity(license, product, seats.get(license.id, 0))
