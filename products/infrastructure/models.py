"""
Product model.
"""
import uuid

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


class Product(models.Model):
    """
    A licensable offering (e.g., RankMath Pro, Content AI).
    Products belong to a brand; slugs are unique per brand only.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    brand = models.ForeignKey("brands.Brand", on_delete=models.CASCADE, related_name="products")
    name = models.CharField(max_length=255, help_text="Product display name")
    slug = models.SlugField(max_length=100, help_text="URL-safe identifier")
    description = models.TextField(blank=True, default="")
    max_seats = models.PositiveIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(1)],
        help_text="Default seat cap for new licenses; empty means unlimited",
    )
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "products"
        ordering = ["brand", "name"]
        constraints = [
            models.UniqueConstraint(fields=["brand", "slug"], name="uniq_product_slug_per_brand"),
        ]
        indexes = [
            models.Index(fields=["brand", "is_active"]),
        ]

    def clean(self):
        """Validate product fields."""
        from django.core.exceptions import ValidationError

        if not self.name or not self.name.strip():
            raise ValidationError("Name is required")

    def save(self, *args, **kwargs):
        """Save product with validation."""
        self.full_clean()
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.brand.name} - {self.name}"

    @property
    def supports_seats(self) -> bool:
        return self.max_seats is not None
