"""
Activation Django ORM model.

This is the infrastructure layer model for activations.
Domain entities are in activations.domain.activation.
"""
import uuid

from django.db import models
from django.utils import timezone


class Activation(models.Model):
    """
    Represents a specific instance where a license is activated.
    Consumes a seat from the license while its status is ``active``.

    Absent identity fields are stored as empty strings so the identity
    tuple constraint also holds for partially specified identities.
    """

    STATUS_CHOICES = [
        ("active", "Active"),
        ("deactivated", "Deactivated"),
        ("expired", "Expired"),
    ]

    INSTANCE_TYPE_CHOICES = [
        ("wordpress", "WordPress"),
        ("machine", "Machine"),
        ("cli", "CLI"),
        ("app", "App"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    license = models.ForeignKey(
        "licenses.License",
        on_delete=models.CASCADE,
        related_name="activations",
    )
    instance_id = models.CharField(max_length=255, blank=True, default="")
    instance_url = models.CharField(max_length=500, blank=True, default="")
    machine_id = models.CharField(max_length=255, blank=True, default="")
    instance_type = models.CharField(
        max_length=20, choices=INSTANCE_TYPE_CHOICES, blank=True, default=""
    )
    instance_metadata = models.JSONField(
        default=dict,
        blank=True,
        help_text="Additional instance information",
    )
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default="active")
    activated_at = models.DateTimeField(default=timezone.now)
    last_checked_at = models.DateTimeField(default=timezone.now)
    deactivated_at = models.DateTimeField(null=True, blank=True)
    deactivation_reason = models.CharField(max_length=255, blank=True, default="")

    class Meta:
        db_table = "activations"
        ordering = ["-activated_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["license", "instance_id", "instance_url", "machine_id"],
                name="uniq_activation_identity",
            ),
        ]
        indexes = [
            models.Index(fields=["license", "status"]),
            models.Index(fields=["license", "instance_id"]),
            models.Index(fields=["license", "machine_id"]),
        ]

    def __str__(self):
        identifier = self.instance_id or self.instance_url or self.machine_id
        return f"{identifier} ({self.status})"
