"""
Brand API views.

These endpoints are used by brand systems to:
- Manage license keys and provision licenses
- Manage license lifecycle and seats
- Manage their product catalog
- Query customer licenses

The acting brand is set on the request by the authentication middleware.
"""

from asgiref.sync import async_to_sync
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from activations.application.commands.deactivate_seats import ForceDeactivateSeatsCommand
from activations.application.handlers.deactivate_seat_handler import ForceDeactivateSeatsHandler
from activations.application.handlers.seat_query_handlers import GetSeatUsageHandler
from activations.application.queries.get_activation_status import GetSeatUsageQuery
from activations.infrastructure.repositories.django_activation_repository import (
    DjangoActivationRepository,
)
from activations.infrastructure.repositories.django_seat_ledger import DjangoSeatLedger
from api.v1.brand.serializers import (
    BrandStatisticsSerializer,
    CreateLicenseKeyRequestSerializer,
    CreateLicenseRequestSerializer,
    CreateProductRequestSerializer,
    CustomerBrandLicensesSerializer,
    CustomerLicensesSerializer,
    CustomerQuerySerializer,
    ForceDeactivateRequestSerializer,
    ForceDeactivationSerializer,
    LicenseListSerializer,
    ProductAccessQuerySerializer,
    ProductAccessSerializer,
    ProductSerializer,
    ProvisionLicenseRequestSerializer,
    RenewLicenseRequestSerializer,
    UpdateLicenseKeyRequestSerializer,
)
from api.v1.common import (
    ErrorResponseSerializer,
    LicenseKeySerializer,
    LicenseKeyWithLicensesSerializer,
    LicenseSerializer,
    SeatUsageSerializer,
)
from brands.application.commands.brand_commands import CreateProductCommand
from brands.application.handlers.product_handlers import (
    CreateProductHandler,
    GetBrandStatisticsHandler,
    ListProductsHandler,
)
from brands.application.queries.brand_queries import GetBrandStatisticsQuery, ListProductsQuery
from brands.infrastructure.repositories.django_brand_repository import DjangoBrandRepository
from brands.infrastructure.repositories.django_product_repository import DjangoProductRepository
from customers.application.handlers.customer_license_handlers import (
    CheckProductAccessHandler,
    GetCustomerBrandLicensesHandler,
    GetCustomerLicensesHandler,
)
from customers.application.queries.customer_queries import (
    CheckProductAccessQuery,
    GetCustomerBrandLicensesQuery,
    GetCustomerLicensesQuery,
)
from licenses.application.commands.cancel_license import CancelLicenseCommand
from licenses.application.commands.create_license import (
    CreateLicenseCommand,
    ProvisionLicenseCommand,
)
from licenses.application.commands.create_license_key import CreateLicenseKeyCommand
from licenses.application.commands.renew_license import RenewLicenseCommand
from licenses.application.commands.resume_license import ResumeLicenseCommand
from licenses.application.commands.suspend_license import SuspendLicenseCommand
from licenses.application.commands.update_license_key import UpdateLicenseKeyCommand
from licenses.application.handlers.license_key_handlers import (
    CreateLicenseKeyHandler,
    GetLicenseKeyHandler,
    UpdateLicenseKeyHandler,
)
from licenses.application.handlers.license_lifecycle_handlers import (
    CancelLicenseHandler,
    RenewLicenseHandler,
    ResumeLicenseHandler,
    SuspendLicenseHandler,
)
from licenses.application.handlers.list_licenses_handler import (
    GetLicenseHandler,
    ListBrandLicensesHandler,
)
from licenses.application.handlers.provision_license_handler import (
    CreateLicenseHandler,
    ProvisionLicenseHandler,
)
from licenses.application.queries.brand_license_queries import (
    GetLicenseKeyQuery,
    GetLicenseQuery,
    ListBrandLicensesQuery,
)
from licenses.infrastructure.repositories.django_license_key_repository import (
    DjangoLicenseKeyRepository,
)
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository

_brand_repo = DjangoBrandRepository()
_product_repo = DjangoProductRepository()
_license_key_repo = DjangoLicenseKeyRepository()
_license_repo = DjangoLicenseRepository()
_activation_repo = DjangoActivationRepository()
_seat_ledger = DjangoSeatLedger()

ERRORS = {
    400: ErrorResponseSerializer,
    401: ErrorResponseSerializer,
    404: ErrorResponseSerializer,
}
TRANSITION_ERRORS = {**ERRORS, 409: ErrorResponseSerializer}


def _customer_handler(handler_class):
    return handler_class(
        brand_repository=_brand_repo,
        product_repository=_product_repo,
        license_key_repository=_license_key_repo,
        license_repository=_license_repo,
        activation_repository=_activation_repo,
    )


def _valid(serializer_class, data):
    serializer = serializer_class(data=data)
    serializer.is_valid(raise_exception=True)
    return serializer.validated_data


class LicenseKeyListView(APIView):
    """View for creating license keys."""

    @extend_schema(
        operation_id="create_license_key",
        summary="Create License Key",
        description="Create an empty license key for a customer email.",
        tags=["Brand API"],
        request=CreateLicenseKeyRequestSerializer,
        responses={201: LicenseKeySerializer, **ERRORS},
    )
    def post(self, request: Request) -> Response:
        """Create a license key."""
        return async_to_sync(self._handle_create)(request)

    async def _handle_create(self, request: Request) -> Response:
        data = _valid(CreateLicenseKeyRequestSerializer, request.data)
        result = await CreateLicenseKeyHandler(_license_key_repo).handle(
            CreateLicenseKeyCommand(brand_id=request.brand.id, customer_email=data["customer_email"])
        )
        return Response(LicenseKeySerializer(result).data, status=status.HTTP_201_CREATED)


class LicenseKeyDetailView(APIView):
    """View for reading and updating one license key."""

    @extend_schema(
        operation_id="get_license_key",
        summary="Get License Key",
        tags=["Brand API"],
        responses={200: LicenseKeyWithLicensesSerializer, **ERRORS},
    )
    def get(self, request: Request, license_key_id) -> Response:
        """Get a license key with its licenses."""
        handler = GetLicenseKeyHandler(_license_key_repo, _license_repo, _product_repo)
        result = async_to_sync(handler.handle)(
            GetLicenseKeyQuery(brand_id=request.brand.id, license_key_id=license_key_id)
        )
        return Response(LicenseKeyWithLicensesSerializer(result).data)

    @extend_schema(
        operation_id="update_license_key",
        summary="Update License Key",
        description="Change the customer email and/or the active flag of a license key.",
        tags=["Brand API"],
        request=UpdateLicenseKeyRequestSerializer,
        responses={200: LicenseKeySerializer, **ERRORS},
    )
    def patch(self, request: Request, license_key_id) -> Response:
        """Update a license key."""
        data = _valid(UpdateLicenseKeyRequestSerializer, request.data)
        result = async_to_sync(UpdateLicenseKeyHandler(_license_key_repo).handle)(
            UpdateLicenseKeyCommand(
                brand_id=request.brand.id,
                license_key_id=license_key_id,
                customer_email=data.get("customer_email"),
                is_active=data.get("is_active"),
            )
        )
        return Response(LicenseKeySerializer(result).data)


class LicenseKeyLicensesView(APIView):
    """View for attaching a license to an existing license key."""

    @extend_schema(
        operation_id="create_license",
        summary="Create License",
        description=(
            "Attach a license for one of the brand's products to a license key. "
            "Without max_seats the product's default seat cap is used."
        ),
        tags=["Brand API"],
        request=CreateLicenseRequestSerializer,
        responses={201: LicenseSerializer, **ERRORS},
    )
    def post(self, request: Request, license_key_id) -> Response:
        """Create a license on a license key."""
        data = _valid(CreateLicenseRequestSerializer, request.data)
        handler = CreateLicenseHandler(_product_repo, _license_key_repo, _license_repo)
        result = async_to_sync(handler.handle)(
            CreateLicenseCommand(
                brand_id=request.brand.id,
                license_key_id=license_key_id,
                product_id=data["product_id"],
                max_seats=data.get("max_seats"),
                expires_at=data.get("expires_at"),
            )
        )
        return Response(LicenseSerializer(result).data, status=status.HTTP_201_CREATED)


class ProvisionLicenseView(APIView):
    """View for provisioning a license key with licenses."""

    @extend_schema(
        operation_id="provision_license",
        summary="Provision License",
        description=(
            "Create a new license key and one license per product for a customer. "
            "This endpoint requires brand API key authentication via X-API-Key header."
        ),
        tags=["Brand API"],
        request=ProvisionLicenseRequestSerializer,
        responses={201: LicenseKeyWithLicensesSerializer, **ERRORS},
    )
    def post(self, request: Request) -> Response:
        """Provision a license key and licenses."""
        return async_to_sync(self._handle_provision_license)(request)

    async def _handle_provision_license(self, request: Request) -> Response:
        data = _valid(ProvisionLicenseRequestSerializer, request.data)
        handler = ProvisionLicenseHandler(
            product_repository=_product_repo,
            license_key_repository=_license_key_repo,
            license_repository=_license_repo,
        )
        result = await handler.handle(
            ProvisionLicenseCommand(
                brand_id=request.brand.id,
                customer_email=data["customer_email"],
                product_ids=data["products"],
                expires_at=data.get("expires_at"),
                max_seats=data.get("max_seats"),
            )
        )
        return Response(LicenseKeyWithLicensesSerializer(result).data, status=status.HTTP_201_CREATED)


class LicenseListView(APIView):
    """View for listing a brand's licenses."""

    @extend_schema(
        operation_id="list_licenses",
        summary="List Licenses",
        description="List the brand's licenses, newest first, with counts per status.",
        tags=["Brand API"],
        parameters=[
            OpenApiParameter("status", str, description="valid, suspended or cancelled"),
            OpenApiParameter("product", str, description="Product slug"),
        ],
        responses={200: LicenseListSerializer, **ERRORS},
    )
    def get(self, request: Request) -> Response:
        """List licenses."""
        handler = ListBrandLicensesHandler(_license_repo, _product_repo, _activation_repo)
        result = async_to_sync(handler.handle)(
            ListBrandLicensesQuery(
                brand_id=request.brand.id,
                status=request.query_params.get("status"),
                product_slug=request.query_params.get("product"),
            )
        )
        return Response(LicenseListSerializer(result).data)


class LicenseDetailView(APIView):
    """View for one license."""

    @extend_schema(
        operation_id="get_license",
        summary="Get License",
        tags=["Brand API"],
        responses={200: LicenseSerializer, **ERRORS},
    )
    def get(self, request: Request, license_id) -> Response:
        """Get a license."""
        handler = GetLicenseHandler(_license_repo, _product_repo, _activation_repo)
        result = async_to_sync(handler.handle)(
            GetLicenseQuery(brand_id=request.brand.id, license_id=license_id)
        )
        return Response(LicenseSerializer(result).data)


class _LicenseTransitionView(APIView):
    handler_class = None
    command_class = None

    def command(self, request: Request, license_id):
        return self.command_class(brand_id=request.brand.id, license_id=license_id)

    def post(self, request: Request, license_id) -> Response:
        handler = self.handler_class(_license_repo, _license_key_repo, _product_repo)
        result = async_to_sync(handler.handle)(self.command(request, license_id))
        return Response(LicenseSerializer(result).data)


class RenewLicenseView(_LicenseTransitionView):
    """View for renewing licenses."""

    handler_class = RenewLicenseHandler

    def command(self, request: Request, license_id):
        data = _valid(RenewLicenseRequestSerializer, request.data)
        return RenewLicenseCommand(
            brand_id=request.brand.id,
            license_id=license_id,
            days=data.get("days"),
            expires_at=data.get("expires_at"),
        )

    @extend_schema(
        operation_id="renew_license",
        summary="Renew License",
        description=(
            "Extend a license by a number of days or to a target date and make it valid. "
            "Cancelled licenses cannot be renewed."
        ),
        tags=["Brand API"],
        request=RenewLicenseRequestSerializer,
        responses={200: LicenseSerializer, **TRANSITION_ERRORS},
    )
    def post(self, request: Request, license_id) -> Response:
        """Renew a license."""
        return super().post(request, license_id)


class SuspendLicenseView(_LicenseTransitionView):
    """View for suspending licenses."""

    handler_class = SuspendLicenseHandler
    command_class = SuspendLicenseCommand

    @extend_schema(
        operation_id="suspend_license",
        summary="Suspend License",
        description="Suspend a license. Its seats stay claimed but it cannot be used.",
        tags=["Brand API"],
        request=None,
        responses={200: LicenseSerializer, **TRANSITION_ERRORS},
    )
    def post(self, request: Request, license_id) -> Response:
        """Suspend a license."""
        return super().post(request, license_id)


class ResumeLicenseView(_LicenseTransitionView):
    """View for resuming suspended licenses."""

    handler_class = ResumeLicenseHandler
    command_class = ResumeLicenseCommand

    @extend_schema(
        operation_id="resume_license",
        summary="Resume License",
        tags=["Brand API"],
        request=None,
        responses={200: LicenseSerializer, **TRANSITION_ERRORS},
    )
    def post(self, request: Request, license_id) -> Response:
        """Resume a license."""
        return super().post(request, license_id)


class CancelLicenseView(_LicenseTransitionView):
    """View for cancelling licenses."""

    handler_class = CancelLicenseHandler
    command_class = CancelLicenseCommand

    @extend_schema(
        operation_id="cancel_license",
        summary="Cancel License",
        description="Cancel a license for good.",
        tags=["Brand API"],
        request=None,
        responses={200: LicenseSerializer, **TRANSITION_ERRORS},
    )
    def post(self, request: Request, license_id) -> Response:
        """Cancel a license."""
        return super().post(request, license_id)


class LicenseSeatsView(APIView):
    """View for seat usage of a license."""

    @extend_schema(
        operation_id="license_seat_usage",
        summary="License Seat Usage",
        tags=["Brand API"],
        responses={200: SeatUsageSerializer, **ERRORS},
    )
    def get(self, request: Request, license_id) -> Response:
        """Get seat usage of a license."""
        handler = GetSeatUsageHandler(_license_repo, _product_repo, _activation_repo)
        result = async_to_sync(handler.handle)(
            GetSeatUsageQuery(brand_id=request.brand.id, license_id=license_id)
        )
        return Response(SeatUsageSerializer(result).data)


class ForceDeactivateSeatsView(APIView):
    """View for releasing every seat of a license."""

    @extend_schema(
        operation_id="force_deactivate_seats",
        summary="Deactivate All Seats",
        tags=["Brand API"],
        request=ForceDeactivateRequestSerializer,
        responses={200: ForceDeactivationSerializer, **ERRORS},
    )
    def post(self, request: Request, license_id) -> Response:
        """Deactivate every active seat of a license."""
        data = _valid(ForceDeactivateRequestSerializer, request.data)
        handler = ForceDeactivateSeatsHandler(_license_repo, _seat_ledger)
        result = async_to_sync(handler.handle)(
            ForceDeactivateSeatsCommand(
                brand_id=request.brand.id, license_id=license_id, reason=data.get("reason") or None
            )
        )
        return Response(ForceDeactivationSerializer(result).data)


class ProductListView(APIView):
    """View for the brand's product catalog."""

    @extend_schema(
        operation_id="list_products",
        summary="List Products",
        tags=["Brand API"],
        parameters=[OpenApiParameter("active", bool, description="Only active products")],
        responses={200: ProductSerializer(many=True), **ERRORS},
    )
    def get(self, request: Request) -> Response:
        """List products."""
        active_only = request.query_params.get("active", "").lower() in ("1", "true")
        result = async_to_sync(ListProductsHandler(_product_repo).handle)(
            ListProductsQuery(brand_id=request.brand.id, active_only=active_only)
        )
        return Response(ProductSerializer(result, many=True).data)

    @extend_schema(
        operation_id="create_product",
        summary="Create Product",
        tags=["Brand API"],
        request=CreateProductRequestSerializer,
        responses={201: ProductSerializer, **ERRORS},
    )
    def post(self, request: Request) -> Response:
        """Create a product."""
        data = _valid(CreateProductRequestSerializer, request.data)
        result = async_to_sync(CreateProductHandler(_product_repo).handle)(
            CreateProductCommand(
                brand_id=request.brand.id,
                name=data["name"],
                slug=data["slug"],
                max_seats=data.get("max_seats"),
                description=data.get("description", ""),
            )
        )
        return Response(ProductSerializer(result).data, status=status.HTTP_201_CREATED)


class BrandStatisticsView(APIView):
    """View for brand statistics."""

    @extend_schema(
        operation_id="brand_statistics",
        summary="Brand Statistics",
        tags=["Brand API"],
        responses={200: BrandStatisticsSerializer, **ERRORS},
    )
    def get(self, request: Request) -> Response:
        """Get catalog and license counts."""
        handler = GetBrandStatisticsHandler(_product_repo, _license_key_repo, _license_repo)
        result = async_to_sync(handler.handle)(GetBrandStatisticsQuery(brand_id=request.brand.id))
        return Response(BrandStatisticsSerializer(result).data)


class CustomerLicensesView(APIView):
    """View for a customer's licenses within the acting brand."""

    @extend_schema(
        operation_id="customer_licenses_in_brand",
        summary="Customer Licenses",
        tags=["Brand API"],
        parameters=[OpenApiParameter("email", str, required=True)],
        responses={200: CustomerBrandLicensesSerializer, **ERRORS},
    )
    def get(self, request: Request) -> Response:
        """List a customer's licenses in this brand."""
        data = _valid(CustomerQuerySerializer, request.query_params)
        result = async_to_sync(_customer_handler(GetCustomerBrandLicensesHandler).handle)(
            GetCustomerBrandLicensesQuery(customer_email=data["email"], brand_id=request.brand.id)
        )
        return Response(CustomerBrandLicensesSerializer(result).data)


class CustomerLicensesAcrossBrandsView(APIView):
    """View for a customer's licenses across every active brand."""

    @extend_schema(
        operation_id="customer_licenses",
        summary="Customer Licenses Across Brands",
        description="Read-only view of every license a customer email holds in any active brand.",
        tags=["Brand API"],
        parameters=[OpenApiParameter("email", str, required=True)],
        responses={200: CustomerLicensesSerializer, **ERRORS},
    )
    def get(self, request: Request) -> Response:
        """List a customer's licenses across brands."""
        data = _valid(CustomerQuerySerializer, request.query_params)
        result = async_to_sync(_customer_handler(GetCustomerLicensesHandler).handle)(
            GetCustomerLicensesQuery(customer_email=data["email"])
        )
        return Response(CustomerLicensesSerializer(result).data)


class CustomerProductAccessView(APIView):
    """View for checking a customer's access to a product."""

    @extend_schema(
        operation_id="customer_product_access",
        summary="Customer Product Access",
        tags=["Brand API"],
        parameters=[
            OpenApiParameter("email", str, required=True),
            OpenApiParameter("product", str, required=True, description="Product slug"),
            OpenApiParameter("all_brands", bool, description="Search every active brand"),
        ],
        responses={200: ProductAccessSerializer, **ERRORS},
    )
    def get(self, request: Request) -> Response:
        """Check whether a customer holds a usable license to a product."""
        data = _valid(ProductAccessQuerySerializer, request.query_params)
        result = async_to_sync(_customer_handler(CheckProductAccessHandler).handle)(
            CheckProductAccessQuery(
                customer_email=data["email"],
                product_slug=data["product"],
                brand_id=None if data["all_brands"] else request.brand.id,
            )
        )
        return Response(ProductAccessSerializer(result).data)
