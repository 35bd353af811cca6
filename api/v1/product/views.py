"""
Product API views.

These endpoints are used by end-user products to:
- Activate and deactivate seats
- Check license key status and seat usage
- Look up the activation of an instance

The license key is authenticated by middleware and stored on the request.
"""

from asgiref.sync import async_to_sync
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from activations.application.commands.activate_license import ActivateLicenseCommand
from activations.application.commands.deactivate_seats import DeactivateSeatCommand
from activations.application.handlers.activate_license_handler import ActivateLicenseHandler
from activations.application.handlers.deactivate_seat_handler import DeactivateSeatHandler
from activations.application.handlers.seat_query_handlers import (
    GetActivationStatusHandler,
    GetProductSeatUsageHandler,
)
from activations.application.queries.get_activation_status import (
    GetActivationStatusQuery,
    GetProductSeatUsageQuery,
)
from activations.infrastructure.repositories.django_activation_repository import (
    DjangoActivationRepository,
)
from activations.infrastructure.repositories.django_seat_ledger import DjangoSeatLedger
from api.v1.common import ActivationSerializer, ErrorResponseSerializer, SeatUsageSerializer
from api.v1.product.serializers import (
    ActivateLicenseRequestSerializer,
    ActivationLookupSerializer,
    DeactivateSeatRequestSerializer,
    LicenseKeyStatusSerializer,
    ProductSeatsQuerySerializer,
    SeatChangeSerializer,
)
from brands.infrastructure.repositories.django_brand_repository import DjangoBrandRepository
from brands.infrastructure.repositories.django_product_repository import DjangoProductRepository
from licenses.application.handlers.get_license_status_handler import GetLicenseKeyStatusHandler
from licenses.application.queries.get_license_status import GetLicenseKeyStatusQuery
from licenses.infrastructure.repositories.django_license_key_repository import (
    DjangoLicenseKeyRepository,
)
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository

_license_key_repo = DjangoLicenseKeyRepository()
_license_repo = DjangoLicenseRepository()
_product_repo = DjangoProductRepository()
_brand_repo = DjangoBrandRepository()
_activation_repo = DjangoActivationRepository()
_seat_ledger = DjangoSeatLedger()

ERRORS = {
    400: ErrorResponseSerializer,
    401: ErrorResponseSerializer,
    404: ErrorResponseSerializer,
}
LICENSE_KEY_HEADER = OpenApiParameter(
    "X-License-Key", str, location=OpenApiParameter.HEADER, required=True
)


def _validated(serializer_class, data):
    serializer = serializer_class(data=data)
    serializer.is_valid(raise_exception=True)
    return serializer


class ActivateLicenseView(APIView):
    """View for activating licenses."""

    @extend_schema(
        operation_id="activate_license",
        summary="Activate License",
        description=(
            "Claim a seat of the license the key holds for a product. "
            "An instance that was deactivated or expired gets its seat back."
        ),
        tags=["Product API"],
        parameters=[LICENSE_KEY_HEADER],
        request=ActivateLicenseRequestSerializer,
        responses={
            201: SeatChangeSerializer,
            409: ErrorResponseSerializer,
            422: ErrorResponseSerializer,
            **ERRORS,
        },
    )
    def post(self, request: Request) -> Response:
        """Activate a license for an instance."""
        return async_to_sync(self._handle_activate)(request)

    async def _handle_activate(self, request: Request) -> Response:
        serializer = _validated(ActivateLicenseRequestSerializer, request.data)
        handler = ActivateLicenseHandler(
            license_key_repository=_license_key_repo,
            license_repository=_license_repo,
            product_repository=_product_repo,
            seat_ledger=_seat_ledger,
            brand_repository=_brand_repo,
        )
        result = await handler.handle(
            ActivateLicenseCommand(
                license_key=request.license_key.key,
                product_slug=serializer.validated_data["product_slug"],
                identity=serializer.to_identity(),
                instance_metadata=serializer.validated_data.get("instance_metadata"),
            )
        )
        return Response(SeatChangeSerializer(result).data, status=status.HTTP_201_CREATED)


class DeactivateSeatView(APIView):
    """View for deactivating seats."""

    @extend_schema(
        operation_id="deactivate_seat",
        summary="Deactivate Seat",
        description="Release the seat held by an instance.",
        tags=["Product API"],
        parameters=[LICENSE_KEY_HEADER],
        request=DeactivateSeatRequestSerializer,
        responses={200: SeatChangeSerializer, 409: ErrorResponseSerializer, **ERRORS},
    )
    def post(self, request: Request) -> Response:
        """Deactivate the seat of an instance."""
        serializer = _validated(DeactivateSeatRequestSerializer, request.data)
        handler = DeactivateSeatHandler(
            license_key_repository=_license_key_repo,
            license_repository=_license_repo,
            product_repository=_product_repo,
            seat_ledger=_seat_ledger,
        )
        result = async_to_sync(handler.handle)(
            DeactivateSeatCommand(
                license_key=request.license_key.key,
                product_slug=serializer.validated_data["product_slug"],
                identity=serializer.to_identity(),
                reason=serializer.validated_data.get("reason") or None,
            )
        )
        return Response(SeatChangeSerializer(result).data)


class GetLicenseStatusView(APIView):
    """View for the license key status."""

    @extend_schema(
        operation_id="get_license_status",
        summary="Get License Status",
        description="Overall status, entitlements and seat usage of the license key.",
        tags=["Product API"],
        parameters=[LICENSE_KEY_HEADER],
        responses={200: LicenseKeyStatusSerializer, **ERRORS},
    )
    def get(self, request: Request) -> Response:
        """Get license key status."""
        handler = GetLicenseKeyStatusHandler(
            license_key_repository=_license_key_repo,
            license_repository=_license_repo,
            product_repository=_product_repo,
            activation_repository=_activation_repo,
        )
        result = async_to_sync(handler.handle)(
            GetLicenseKeyStatusQuery(license_key=request.license_key.key)
        )
        return Response(LicenseKeyStatusSerializer(result).data)


class ActivationStatusView(APIView):
    """View for the activation of an instance."""

    @extend_schema(
        operation_id="get_activation_status",
        summary="Get Activation Status",
        tags=["Product API"],
        parameters=[
            LICENSE_KEY_HEADER,
            OpenApiParameter("product", str, required=True, description="Product slug"),
            OpenApiParameter("instance_id", str),
            OpenApiParameter("instance_url", str),
            OpenApiParameter("machine_id", str),
        ],
        responses={200: ActivationSerializer, **ERRORS},
    )
    def get(self, request: Request) -> Response:
        """Get the activation of an instance."""
        serializer = _validated(ActivationLookupSerializer, request.query_params)
        handler = GetActivationStatusHandler(
            _license_key_repo, _license_repo, _product_repo, _activation_repo
        )
        result = async_to_sync(handler.handle)(
            GetActivationStatusQuery(
                license_key=request.license_key.key,
                product_slug=serializer.validated_data["product"],
                identity=serializer.to_identity(),
            )
        )
        return Response(ActivationSerializer(result).data)


class ProductSeatsView(APIView):
    """View for seat usage of the key's license for a product."""

    @extend_schema(
        operation_id="product_seat_usage",
        summary="Seat Usage",
        tags=["Product API"],
        parameters=[
            LICENSE_KEY_HEADER,
            OpenApiParameter("product", str, required=True, description="Product slug"),
        ],
        responses={200: SeatUsageSerializer, **ERRORS},
    )
    def get(self, request: Request) -> Response:
        """Get seat usage."""
        serializer = _validated(ProductSeatsQuerySerializer, request.query_params)
        handler = GetProductSeatUsageHandler(
            _license_key_repo, _license_repo, _product_repo, _activation_repo
        )
        result = async_to_sync(handler.handle)(
            GetProductSeatUsageQuery(
                license_key=request.license_key.key,
                product_slug=serializer.validated_data["product"],
            )
        )
        return Response(SeatUsageSerializer(result).data)
