"""
ActivateLicenseHandler.

Handler for claiming a seat of a license on an instance.
"""
import logging

from activations.application.commands.activate_license import ActivateLicenseCommand
from activations.application.dto.activation_dto import SeatChangeDTO
from activations.application.services.license_resolver import resolve_license
from activations.domain.events import LicenseActivated
from activations.ports.seat_ledger import SeatLedger
from brands.ports.brand_repository import BrandRepository
from brands.ports.product_repository import ProductRepository
from core.domain.exceptions import (
    AlreadyActivatedError,
    LicenseNotUsableError,
    NoAvailableSeatsError,
)
from core.infrastructure.events import event_bus
from core.metrics import seat_activation_rejections_total
from licenses.ports.license_key_repository import LicenseKeyRepository
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


class ActivateLicenseHandler:
    """Handler for ActivateLicenseCommand."""

    def __init__(
        self,
        license_key_repository: LicenseKeyRepository,
        license_repository: LicenseRepository,
        product_repository: ProductRepository,
        seat_ledger: SeatLedger,
        brand_repository: BrandRepository,
    ):
        """Initialize handler with repositories."""
        self.license_key_repository = license_key_repository
        self.license_repository = license_repository
        self.product_repository = product_repository
        self.seat_ledger = seat_ledger
        self.brand_repository = brand_repository

    async def handle(self, command: ActivateLicenseCommand) -> SeatChangeDTO:
        """
        Handle activate license command.

        Activating an instance that already holds a seat is refused
        rather than repeated; a deactivated or expired instance gets its
        seat back.

        Args:
            command: ActivateLicenseCommand

        Returns:
            SeatChangeDTO with the activation and seat counts

        Raises:
            LicenseKeyNotFoundError: If the license key is unknown
            ProductNotFoundError: If the product is unknown to the brand
            LicenseNotFoundError: If the key holds no license for it
            LicenseNotUsableError: If the brand, key or license is not usable
            AlreadyActivatedError: If the instance already holds a seat
            NoAvailableSeatsError: If every seat is taken
        """
        resolved = await resolve_license(
            self.license_key_repository,
            self.product_repository,
            self.license_repository,
            command.license_key,
            command.product_slug,
        )
        license_key = resolved.license_key

        try:
            brand = await self.brand_repository.find_by_id(license_key.brand_id)
            if brand is None or not brand.is_active:
                raise LicenseNotUsableError("Brand is inactive")
            if not license_key.is_active:
                raise LicenseNotUsableError("License key is inactive")
            change = await self.seat_ledger.activate(
                resolved.license.id, command.identity, command.instance_metadata
            )
        except (LicenseNotUsableError, AlreadyActivatedError, NoAvailableSeatsError) as exc:
            seat_activation_rejections_total.labels(reason=exc.code.lower()).inc()
            logger.info(
                "Activation refused",
                extra={
                    "license_id": str(resolved.license.id),
                    "instance": str(command.identity),
                    "reason": exc.code,
                },
            )
            raise

        await event_bus.publish(
            LicenseActivated(
                activation_id=change.activation.id,
                license_id=resolved.license.id,
                license_key_id=license_key.id,
                brand_id=license_key.brand_id,
                identity=command.identity,
                seats_before=change.seats_before,
                seats_after=change.seats_after,
                reactivated=change.reactivated,
            )
        )
        message = "License reactivated" if change.reactivated else "License activated"
        return SeatChangeDTO.from_change(resolved.license, change, message)
