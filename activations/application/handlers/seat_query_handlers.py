"""
Seat and activation read handlers.
"""
from activations.application.dto.activation_dto import ActivationDTO, SeatUsageDTO
from activations.application.queries.get_activation_status import (
    GetActivationStatusQuery,
    GetProductSeatUsageQuery,
    GetSeatUsageQuery,
)
from activations.application.services.license_resolver import resolve_license
from activations.domain.services import SeatManager
from activations.ports.activation_repository import ActivationRepository
from brands.ports.product_repository import ProductRepository
from core.domain.exceptions import ActivationNotFoundError
from licenses.application.services.ownership import require_license
from licenses.ports.license_key_repository import LicenseKeyRepository
from licenses.ports.license_repository import LicenseRepository


class GetSeatUsageHandler:
    """Handler for GetSeatUsageQuery."""

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

    async def handle(self, query: GetSeatUsageQuery) -> SeatUsageDTO:
        """
        Seat usage of a license owned by the acting brand.

        Raises:
            LicenseNotFoundError: If the license is missing or foreign
        """
        license = await require_license(self.license_repository, query.brand_id, query.license_id)
        product = await self.product_repository.find_by_id(query.brand_id, license.product_id)
        active = await self.activation_repository.find_active_by_license(license.id)
        return SeatUsageDTO.from_usage(
            license, str(product.slug) if product else "", SeatManager.seat_usage(license, active)
        )


class GetProductSeatUsageHandler:
    """Handler for GetProductSeatUsageQuery."""

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

    async def handle(self, query: GetProductSeatUsageQuery) -> SeatUsageDTO:
        resolved = await resolve_license(
            self.license_key_repository,
            self.product_repository,
            self.license_repository,
            query.license_key,
            query.product_slug,
        )
        active = await self.activation_repository.find_active_by_license(resolved.license.id)
        return SeatUsageDTO.from_usage(
            resolved.license,
            str(resolved.product.slug),
            SeatManager.seat_usage(resolved.license, active),
        )


class GetActivationStatusHandler:
    """Handler for GetActivationStatusQuery."""

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

    async def handle(self, query: GetActivationStatusQuery) -> ActivationDTO:
        """
        Handle get activation status query.

        A lookup of an active instance counts as a check-in and refreshes
        its ``last_checked_at``.

        Args:
            query: GetActivationStatusQuery

        Returns:
            ActivationDTO of the matching activation, whatever its status

        Raises:
            ActivationNotFoundError: If the instance never activated
        """
        resolved = await resolve_license(
            self.license_key_repository,
            self.product_repository,
            self.license_repository,
            query.license_key,
            query.product_slug,
        )
        activation = await self.activation_repository.find_by_identity(
            resolved.license.id, query.identity
        )
        if activation is None:
            raise ActivationNotFoundError(f"Activation not found for instance {query.identity}")
        if activation.is_active:
            checked = activation.touch()
            if await self.activation_repository.record_check(checked):
                activation = checked
        return ActivationDTO.from_entity(activation)
