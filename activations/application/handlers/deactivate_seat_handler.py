"""
Seat release handlers.
"""
import logging

from activations.application.commands.deactivate_seats import (
    DeactivateSeatCommand,
    ForceDeactivateSeatsCommand,
)
from activations.application.dto.activation_dto import ForceDeactivationDTO, SeatChangeDTO
from activations.application.services.license_resolver import resolve_license
from activations.domain.events import SeatDeactivated, SeatsForceDeactivated
from activations.domain.services import DEFAULT_FORCE_DEACTIVATION_REASON
from activations.ports.seat_ledger import SeatLedger
from brands.ports.product_repository import ProductRepository
from core.infrastructure.events import event_bus
from licenses.application.services.ownership import require_license
from licenses.ports.license_key_repository import LicenseKeyRepository
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


class DeactivateSeatHandler:
    """Handler for DeactivateSeatCommand."""

    def __init__(
        self,
        license_key_repository: LicenseKeyRepository,
        license_repository: LicenseRepository,
        product_repository: ProductRepository,
        seat_ledger: SeatLedger,
    ):
        """Initialize handler with repositories."""
        self.license_key_repository = license_key_repository
        self.license_repository = license_repository
        self.product_repository = product_repository
        self.seat_ledger = seat_ledger

    async def handle(self, command: DeactivateSeatCommand) -> SeatChangeDTO:
        """
        Handle deactivate seat command.

        Releasing a seat works whatever the state of the key or license,
        so a customer can always free an instance.

        Args:
            command: DeactivateSeatCommand

        Returns:
            SeatChangeDTO with the deactivated activation

        Raises:
            ActivationNotFoundError: If no activation matches the identity
            NotCurrentlyActiveError: If the activation holds no seat
        """
        resolved = await resolve_license(
            self.license_key_repository,
            self.product_repository,
            self.license_repository,
            command.license_key,
            command.product_slug,
        )
        change = await self.seat_ledger.deactivate(
            resolved.license.id, command.identity, command.reason
        )

        await event_bus.publish(
            SeatDeactivated(
                activation_id=change.activation.id,
                license_id=resolved.license.id,
                license_key_id=resolved.license_key.id,
                brand_id=resolved.license_key.brand_id,
                identity=change.activation.identity,
                seats_before=change.seats_before,
                seats_after=change.seats_after,
                reason=command.reason,
            )
        )
        return SeatChangeDTO.from_change(resolved.license, change, "Seat deactivated")


class ForceDeactivateSeatsHandler:
    """Handler for ForceDeactivateSeatsCommand."""

    def __init__(self, license_repository: LicenseRepository, seat_ledger: SeatLedger):
        """Initialize handler with repositories."""
        self.license_repository = license_repository
        self.seat_ledger = seat_ledger

    async def handle(self, command: ForceDeactivateSeatsCommand) -> ForceDeactivationDTO:
        """
        Release every seat of a license owned by the acting brand.

        Raises:
            LicenseNotFoundError: If the license is missing or foreign
        """
        license = await require_license(self.license_repository, command.brand_id, command.license_id)
        reason = command.reason or DEFAULT_FORCE_DEACTIVATION_REASON
        count = await self.seat_ledger.deactivate_all(license.id, reason)

        if count:
            await event_bus.publish(
                SeatsForceDeactivated(
                    license_id=license.id,
                    license_key_id=license.license_key_id,
                    brand_id=command.brand_id,
                    deactivated_count=count,
                    reason=reason,
                )
            )
        logger.info(
            "Seats force deactivated",
            extra={"brand_id": str(command.brand_id), "license_id": str(license.id), "count": count},
        )
        return ForceDeactivationDTO(license_id=license.id, deactivated_count=count, reason=reason)
