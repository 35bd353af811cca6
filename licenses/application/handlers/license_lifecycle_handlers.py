"""
License lifecycle handlers.

Handlers for renew, suspend, resume, and cancel license commands. Each
one applies the transition to a license of the acting brand while
holding it, so concurrent changes of one license queue up, and then
publishes the matching event.
"""
import logging

from brands.ports.product_repository import ProductRepository
from core.domain.exceptions import LicenseNotFoundError
from core.infrastructure.events import event_bus
from licenses.application.commands.cancel_license import CancelLicenseCommand
from licenses.application.commands.renew_license import RenewLicenseCommand
from licenses.application.commands.resume_license import ResumeLicenseCommand
from licenses.application.commands.suspend_license import SuspendLicenseCommand
from licenses.application.dto.license_dto import LicenseDTO
from licenses.domain.events import (
    LicenseCancelled,
    LicenseRenewed,
    LicenseResumed,
    LicenseSuspended,
)
from licenses.domain.license import License
from licenses.ports.license_key_repository import LicenseKeyRepository
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


class _LifecycleHandler:
    """Shared flow of the lifecycle handlers."""

    event_class = None

    def __init__(
        self,
        license_repository: LicenseRepository,
        license_key_repository: LicenseKeyRepository,
        product_repository: ProductRepository,
    ):
        """Initialize handler with repositories."""
        self.license_repository = license_repository
        self.license_key_repository = license_key_repository
        self.product_repository = product_repository

    def transition(self, license: License, command) -> License:
        raise NotImplementedError

    def event_kwargs(self, before: License, after: License) -> dict:
        return {}

    async def handle(self, command) -> LicenseDTO:
        """
        Apply the transition to a license of the acting brand.

        Args:
            command: Lifecycle command with brand_id and license_id

        Returns:
            LicenseDTO after the transition

        Raises:
            LicenseNotFoundError: If the license is missing or foreign
            InvalidTransitionError: If the table forbids the transition
        """
        result = await self.license_repository.apply_transition(
            command.brand_id, command.license_id, lambda current: self.transition(current, command)
        )
        if result is None:
            raise LicenseNotFoundError(f"License {command.license_id} not found")
        license, updated = result

        if updated is not license:
            await event_bus.publish(
                self.event_class(
                    license_id=updated.id,
                    license_key_id=updated.license_key_id,
                    brand_id=command.brand_id,
                    previous_status=license.status.value,
                    **self.event_kwargs(license, updated),
                )
            )
            logger.info(
                "License %s",
                self.event_class.__name__,
                extra={
                    "brand_id": str(command.brand_id),
                    "license_id": str(updated.id),
                    "from_status": license.status.value,
                    "to_status": updated.status.value,
                },
            )

        product = await self.product_repository.find_by_id(command.brand_id, updated.product_id)
        return LicenseDTO.from_entity(updated, product)


class RenewLicenseHandler(_LifecycleHandler):
    """Handler for RenewLicenseCommand."""

    event_class = LicenseRenewed

    def transition(self, license: License, command: RenewLicenseCommand) -> License:
        return license.renew(days=command.days, target_date=command.expires_at)

    def event_kwargs(self, before: License, after: License) -> dict:
        return {
            "previous_expiration": before.expires_at,
            "new_expiration": after.expires_at,
        }


class SuspendLicenseHandler(_LifecycleHandler):
    """Handler for SuspendLicenseCommand. Seats stay claimed."""

    event_class = LicenseSuspended

    def transition(self, license: License, command: SuspendLicenseCommand) -> License:
        return license.suspend()


class ResumeLicenseHandler(_LifecycleHandler):
    """Handler for ResumeLicenseCommand."""

    event_class = LicenseResumed

    def transition(self, license: License, command: ResumeLicenseCommand) -> License:
        return license.resume()


class CancelLicenseHandler(_LifecycleHandler):
    """Handler for CancelLicenseCommand."""

    event_class = LicenseCancelled

    def transition(self, license: License, command: CancelLicenseCommand) -> License:
        return license.cancel()
