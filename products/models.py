"""Model registration for the products app."""
from products.infrastructure.models import Product  # noqa: F401
