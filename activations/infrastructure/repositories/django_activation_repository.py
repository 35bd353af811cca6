"""
Django implementation of ActivationRepository port.

This adapter converts between domain entities and Django ORM models.
The conversion helpers are shared with the seat ledger.
"""

import uuid
from typing import Dict, List, Optional

from asgiref.sync import sync_to_async
from django.db.models import Count, QuerySet

from activations.domain.activation import Activation
from activations.domain.services import pick_match
from activations.infrastructure.models import Activation as ActivationModel
from activations.ports.activation_repository import ActivationRepository
from core.domain.value_objects import ActivationStatus, InstanceIdentity


def activation_to_domain(model: ActivationModel) -> Activation:
    """
    Convert Django model to domain entity.

    Args:
        model: Django Activation model

    Returns:
        Activation domain entity
    """
    return Activation(
        id=model.id,
        license_id=model.license_id,
        identity=InstanceIdentity(
            instance_id=model.instance_id or None,
            instance_url=model.instance_url or None,
            machine_id=model.machine_id or None,
            instance_type=model.instance_type or None,
        ),
        status=ActivationStatus(model.status),
        activated_at=model.activated_at,
        last_checked_at=model.last_checked_at,
        deactivated_at=model.deactivated_at,
        deactivation_reason=model.deactivation_reason or None,
        instance_metadata=model.instance_metadata or {},
    )


def activation_to_model(activation: Activation) -> ActivationModel:
    """
    Build an unsaved Django model holding the entity's state.

    Saving it inserts a new row or overwrites the row with the same id.
    """
    identity = activation.identity
    return ActivationModel(
        id=activation.id,
        license_id=activation.license_id,
        instance_id=identity.instance_id or "",
        instance_url=identity.instance_url or "",
        machine_id=identity.machine_id or "",
        instance_type=identity.instance_type.value if identity.instance_type else "",
        instance_metadata=activation.instance_metadata,
        status=activation.status.value,
        activated_at=activation.activated_at,
        last_checked_at=activation.last_checked_at,
        deactivated_at=activation.deactivated_at,
        deactivation_reason=activation.deactivation_reason or "",
    )


def identity_queryset(license_id: uuid.UUID, identity: InstanceIdentity) -> QuerySet:
    """Activations of a license matching the supplied identity fields."""
    # pylint: disable=no-member
    return ActivationModel.objects.filter(license_id=license_id, **identity.lookup_fields())


class DjangoActivationRepository(ActivationRepository):
    """Django ORM implementation of ActivationRepository."""

    @sync_to_async
    def find_by_identity(
        self, license_id: uuid.UUID, identity: InstanceIdentity
    ) -> Optional[Activation]:
        matches = [activation_to_domain(m) for m in identity_queryset(license_id, identity)]
        return pick_match(matches)

    @sync_to_async
    def find_active_by_license(self, license_id: uuid.UUID) -> List[Activation]:
        """
        Find ACTIVE activations of a license, oldest first.

        Args:
            license_id: License UUID

        Returns:
            List of Activation entities
        """
        # pylint: disable=no-member
        models = ActivationModel.objects.filter(
            license_id=license_id, status=ActivationStatus.ACTIVE.value
        ).order_by("activated_at")
        return [activation_to_domain(model) for model in models]

    @sync_to_async
    def record_check(self, activation: Activation) -> bool:
        # pylint: disable=no-member
        updated = ActivationModel.objects.filter(
            id=activation.id, status=ActivationStatus.ACTIVE.value
        ).update(last_checked_at=activation.last_checked_at)
        return updated == 1

    @sync_to_async
    def count_active_by_licenses(
        self, license_ids: List[uuid.UUID]
    ) -> Dict[uuid.UUID, int]:
        if not license_ids:
            return {}
        # pylint: disable=no-member
        rows = (
            ActivationModel.objects.filter(
                license_id__in=license_ids, status=ActivationStatus.ACTIVE.value
            )
            .values("license_id")
            .annotate(active=Count("id"))
        )
        counts = {license_id: 0 for license_id in license_ids}
        for row in rows:
            counts[row["license_id"]] = row["active"]
        return counts
