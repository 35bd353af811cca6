"""
Django implementation of the SeatLedger port.

Every operation runs in one transaction that first locks the License row
with SELECT ... FOR UPDATE. Concurrent operations on the same license
therefore queue up behind each other, and the seat count read after the
lock is still true when the change is written.
"""
import logging
import uuid
from datetime import datetime
from typing import Dict, List, Optional

from asgiref.sync import sync_to_async
from django.db import IntegrityError, transaction

from activations.domain.services import SeatChange, SeatManager
from activations.infrastructure.models import Activation as ActivationModel
from activations.infrastructure.repositories.django_activation_repository import (
    activation_to_domain,
    activation_to_model,
    identity_queryset,
)
from activations.ports.seat_ledger import SeatLedger
from core.domain.clock import utc_now
from core.domain.exceptions import AlreadyActivatedError, LicenseNotFoundError
from core.domain.value_objects import ActivationStatus, InstanceIdentity
from licenses.infrastructure.models import License as LicenseModel
from licenses.infrastructure.repositories.django_license_repository import license_to_domain

logger = logging.getLogger(__name__)

ACTIVE = ActivationStatus.ACTIVE.value


def _lock_license(license_id: uuid.UUID) -> LicenseModel:
    try:
        # pylint: disable=no-member
        return LicenseModel.objects.select_for_update().get(id=license_id)
    except LicenseModel.DoesNotExist as exc:  # pylint: disable=no-member
        raise LicenseNotFoundError() from exc


def _active_count(license_id: uuid.UUID) -> int:
    # pylint: disable=no-member
    return ActivationModel.objects.filter(license_id=license_id, status=ACTIVE).count()


class DjangoSeatLedger(SeatLedger):
    """Seat ledger backed by row locks on the licenses table."""

    def _activate_sync(
        self,
        license_id: uuid.UUID,
        identity: InstanceIdentity,
        instance_metadata: Optional[Dict],
    ) -> SeatChange:
        with transaction.atomic():
            license = license_to_domain(_lock_license(license_id))
            matches = [activation_to_domain(m) for m in identity_queryset(license_id, identity)]
            change = SeatManager.activate(
                license,
                identity,
                matches,
                seats_used=_active_count(license_id),
                instance_metadata=instance_metadata,
            )
            model = activation_to_model(change.activation)
            try:
                with transaction.atomic():
                    if change.reactivated:
                        model.save(force_update=True)
                    else:
                        model.save(force_insert=True)
            except IntegrityError as exc:
                logger.warning(
                    "Duplicate activation identity rejected",
                    extra={"license_id": str(license_id), "instance": str(identity)},
                )
                raise AlreadyActivatedError() from exc
        return change

    async def activate(
        self,
        license_id: uuid.UUID,
        identity: InstanceIdentity,
        instance_metadata: Optional[Dict] = None,
    ) -> SeatChange:
        return await sync_to_async(self._activate_sync)(license_id, identity, instance_metadata)

    def _deactivate_sync(
        self, license_id: uuid.UUID, identity: InstanceIdentity, reason: Optional[str]
    ) -> SeatChange:
        with transaction.atomic():
            _lock_license(license_id)
            matches = [activation_to_domain(m) for m in identity_queryset(license_id, identity)]
            change = SeatManager.deactivate(matches, _active_count(license_id), reason)
            activation_to_model(change.activation).save(force_update=True)
        return change

    async def deactivate(
        self,
        license_id: uuid.UUID,
        identity: InstanceIdentity,
        reason: Optional[str] = None,
    ) -> SeatChange:
        return await sync_to_async(self._deactivate_sync)(license_id, identity, reason)

    def _deactivate_all_sync(self, license_id: uuid.UUID, reason: str) -> int:
        with transaction.atomic():
            _lock_license(license_id)
            # pylint: disable=no-member
            return ActivationModel.objects.filter(license_id=license_id, status=ACTIVE).update(
                status=ActivationStatus.DEACTIVATED.value,
                deactivated_at=utc_now(),
                deactivation_reason=reason,
            )

    async def deactivate_all(self, license_id: uuid.UUID, reason: str) -> int:
        return await sync_to_async(self._deactivate_all_sync)(license_id, reason)

    def _expire_license_sync(self, license_id: uuid.UUID, current_time: datetime) -> int:
        with transaction.atomic():
            license = license_to_domain(_lock_license(license_id))
            if not license.is_expired(current_time):
                # Renewed since the candidates were selected.
                return 0
            # pylint: disable=no-member
            active = ActivationModel.objects.filter(license_id=license_id, status=ACTIVE)
            for model in active:
                activation_to_model(activation_to_domain(model).expire(current_time)).save(
                    force_update=True,
                    update_fields=["status", "deactivated_at", "deactivation_reason"],
                )
            return len(active)

    def _expire_lapsed_sync(self, current_time: datetime, dry_run: bool) -> List[Dict]:
        # pylint: disable=no-member
        candidates = (
            LicenseModel.objects.filter(expires_at__lte=current_time, activations__status=ACTIVE)
            .select_related("license_key")
            .distinct()
        )
        results = []
        for license_model in candidates:
            if dry_run:
                count = _active_count(license_model.id)
            else:
                count = self._expire_license_sync(license_model.id, current_time)
            if count:
                results.append(
                    {
                        "license_id": license_model.id,
                        "license_key_id": license_model.license_key_id,
                        "brand_id": license_model.license_key.brand_id,
                        "count": count,
                    }
                )
        return results

    async def expire_lapsed(
        self, current_time: datetime, dry_run: bool = False
    ) -> List[Dict]:
        return await sync_to_async(self._expire_lapsed_sync)(current_time, dry_run)
