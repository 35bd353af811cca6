"""
API exception handlers.

Maps domain exceptions to HTTP responses with the body
``{"error": {"code": ..., "message": ...}}``.
"""

import logging
from typing import Any, Dict, Optional

from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.domain.exceptions import (
    ActivationNotFoundError,
    AlreadyActivatedError,
    AuthenticationError,
    DomainException,
    InvalidTransitionError,
    LicenseNotUsableError,
    NoAvailableSeatsError,
    NotCurrentlyActiveError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

DOMAIN_STATUS = (
    ((NotFoundError, ActivationNotFoundError), status.HTTP_404_NOT_FOUND),
    (
        (InvalidTransitionError, AlreadyActivatedError, NotCurrentlyActiveError),
        status.HTTP_409_CONFLICT,
    ),
    ((LicenseNotUsableError, NoAvailableSeatsError), status.HTTP_422_UNPROCESSABLE_ENTITY),
    ((ValidationError,), status.HTTP_400_BAD_REQUEST),
    ((AuthenticationError,), status.HTTP_401_UNAUTHORIZED),
)


def status_for(exc: DomainException) -> int:
    """HTTP status of a domain exception."""
    for kinds, status_code in DOMAIN_STATUS:
        if isinstance(exc, kinds):
            return status_code
    return status.HTTP_400_BAD_REQUEST


def error_body(code: str, message: str) -> Dict[str, Dict[str, str]]:
    return {"error": {"code": code, "message": message}}


def custom_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """Custom exception handler for REST API."""
    correlation_id = _get_correlation_id(context)

    if isinstance(exc, DomainException):
        response = _handle_domain_exception(exc, correlation_id)
    elif isinstance(exc, APIException):
        response = exception_handler(exc, context)
        code = exc.default_code.upper().replace("-", "_")
        if isinstance(response.data, dict) and "detail" in response.data:
            message = str(response.data["detail"])
        else:
            code = "VALIDATION_ERROR"
            message = _flatten(response.data)
        response.data = error_body(code, message)
    elif isinstance(exc, Http404):
        response = Response(
            error_body("NOT_FOUND", "Resource not found"), status=status.HTTP_404_NOT_FOUND
        )
    else:
        response = _handle_unexpected_exception(exc, correlation_id)

    if correlation_id:
        response["X-Correlation-ID"] = correlation_id
    return response


def _flatten(data: Any) -> str:
    """One-line message from DRF serializer errors."""
    if isinstance(data, dict):
        return "; ".join(f"{field}: {_flatten(errors)}" for field, errors in data.items())
    if isinstance(data, list):
        return " ".join(_flatten(item) for item in data)
    return str(data)


def _get_correlation_id(context: Dict[str, Any]) -> Optional[str]:
    request = context.get("request")
    if not request:
        return None
    return getattr(request, "correlation_id", None)


def _handle_domain_exception(exc: DomainException, correlation_id: Optional[str]) -> Response:
    """Handle domain-specific exceptions."""
    status_code = status_for(exc)
    logger.warning(
        "Domain exception: %s - %s",
        exc.code,
        exc.message,
        extra={"correlation_id": correlation_id, "status_code": status_code},
    )
    return Response(error_body(exc.code, exc.message), status=status_code)


def _handle_unexpected_exception(exc: Exception, correlation_id: Optional[str]) -> Response:
    """Handle unexpected or untracked exceptions."""
    logger.error(
        "Unexpected error: %s", exc, extra={"correlation_id": correlation_id}, exc_info=True
    )
    return Response(
        error_body("INTERNAL_ERROR", "An internal error occurred"),
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
