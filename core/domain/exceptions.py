"""
Domain exceptions.

Every expected, caller-recoverable failure of the entitlement engine is one of
the exceptions below. Each carries a machine-readable ``code`` that the API
layer passes through unchanged.
"""


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    default_message = "Domain rule violated"
    default_code = "DOMAIN_ERROR"

    def __init__(self, message: str = None, code: str = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
        """
        message = message or self.default_message
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code


class NotFoundError(DomainException):
    """
    Raised when an entity is missing or is owned by another brand.

    Both cases are reported the same way so that a brand cannot learn
    about the existence of another tenant's resources.
    """

    default_message = "Resource not found"
    default_code = "NOT_FOUND"


class BrandNotFoundError(NotFoundError):
    """Raised when a brand is not found."""

    default_message = "Brand not found"
    default_code = "BRAND_NOT_FOUND"


class ProductNotFoundError(NotFoundError):
    """Raised when a product is not found for the brand."""

    default_message = "Product not found"
    default_code = "PRODUCT_NOT_FOUND"


class LicenseKeyNotFoundError(NotFoundError):
    """Raised when a license key is not found for the brand."""

    default_message = "License key not found"
    default_code = "LICENSE_KEY_NOT_FOUND"


class LicenseNotFoundError(NotFoundError):
    """Raised when a license is not found for the brand."""

    default_message = "License not found"
    default_code = "LICENSE_NOT_FOUND"


class InvalidTransitionError(DomainException):
    """Raised when a lifecycle operation is not allowed from the current status."""

    default_message = "Operation not allowed for the current license status"
    default_code = "INVALID_TRANSITION"


class LicenseNotUsableError(DomainException):
    """Raised when a suspended, cancelled or expired license is used."""

    default_message = "License is not valid or has expired"
    default_code = "LICENSE_NOT_USABLE"


class NoAvailableSeatsError(DomainException):
    """Raised when all seats of a license are taken."""

    default_message = "No available seats for this license"
    default_code = "NO_AVAILABLE_SEATS"


class ActivationException(DomainException):
    """Base exception for activation identity state mismatches."""


class AlreadyActivatedError(ActivationException):
    """Raised when the instance already holds an active seat."""

    default_message = "License is already activated for this instance"
    default_code = "ALREADY_ACTIVATED"


class NotCurrentlyActiveError(ActivationException):
    """Raised when deactivating an instance that holds no active seat."""

    default_message = "License is not currently activated for this instance"
    default_code = "NOT_CURRENTLY_ACTIVE"


class ActivationNotFoundError(ActivationException):
    """Raised when no activation matches the instance identity."""

    default_message = "No activation found for this instance"
    default_code = "ACTIVATION_NOT_FOUND"


class ValidationError(DomainException):
    """Raised for malformed input such as a bad email or renewal period."""

    default_message = "Invalid input"
    default_code = "VALIDATION_ERROR"


class AuthenticationError(DomainException):
    """Raised when a brand API key or a license key cannot be resolved."""

    default_message = "Invalid credentials"
    default_code = "AUTHENTICATION_FAILED"
