"""
Customer license handlers.

These are the only reads that cross brand boundaries. They never write.
"""
import logging
import uuid
from dataclasses import asdict, dataclass
from typing import Dict, List

from activations.ports.activation_repository import ActivationRepository
from brands.domain.brand import Brand
from brands.domain.product import Product
from brands.ports.brand_repository import BrandRepository
from brands.ports.product_repository import ProductRepository
from core.domain.exceptions import BrandNotFoundError
from core.domain.value_objects import Email
from customers.application.dto.customer_dto import (
    BrandRefDTO,
    CustomerBrandLicensesDTO,
    CustomerLicenseKeyDTO,
    CustomerLicensesDTO,
    ProductAccessDTO,
    ProductSummaryDTO,
)
from customers.application.queries.customer_queries import (
    CheckProductAccessQuery,
    GetCustomerBrandLicensesQuery,
    GetCustomerLicensesQuery,
)
from customers.domain.services import CustomerLicenseAggregator
from licenses.application.dto.license_dto import LicenseDTO, LicenseKeyDTO
from licenses.domain.license import License
from licenses.domain.license_key import LicenseKey
from licenses.ports.license_key_repository import LicenseKeyRepository
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


@dataclass
class _CustomerData:
    keys: List[LicenseKey]
    licenses: List[License]
    products: Dict[uuid.UUID, Product]
    brands: Dict[uuid.UUID, Brand]
    seats: Dict[uuid.UUID, int]

    def licenses_of(self, license_key: LicenseKey) -> List[License]:
        return [license for license in self.licenses if license.license_key_id == license_key.id]

    def license_dto(self, license: License) -> LicenseDTO:
        return LicenseDTO.from_entity(
            license, self.products.get(license.product_id), self.seats.get(license.id, 0)
        )

    def key_dtos(self) -> List[CustomerLicenseKeyDTO]:
        result = []
        for license_key in self.keys:
            brand = self.brands.get(license_key.brand_id)
            result.append(
                CustomerLicenseKeyDTO(
                    license_key=LicenseKeyDTO.from_entity(license_key),
                    brand=BrandRefDTO.from_entity(brand) if brand else None,
                    licenses=[self.license_dto(license) for license in self.licenses_of(license_key)],
                )
            )
        return result

    def products_summary(self) -> List[ProductSummaryDTO]:
        return [
            ProductSummaryDTO(**asdict(summary))
            for summary in CustomerLicenseAggregator.products_summary(
                self.licenses, self.products, self.brands, self.seats
            )
        ]


class _CustomerHandler:
    def __init__(
        self,
        brand_repository: BrandRepository,
        product_repository: ProductRepository,
        license_key_repository: LicenseKeyRepository,
        license_repository: LicenseRepository,
        activation_repository: ActivationRepository,
    ):
        """Initialize handler with repositories."""
        self.brand_repository = brand_repository
        self.product_repository = product_repository
        self.license_key_repository = license_key_repository
        self.license_repository = license_repository
        self.activation_repository = activation_repository

    async def _load(self, keys: List[LicenseKey]) -> _CustomerData:
        licenses = await self.license_repository.find_by_license_keys([key.id for key in keys])
        products = {
            product.id: product
            for product in await self.product_repository.find_many(
                list({license.product_id for license in licenses})
            )
        }
        brands = {}
        for brand_id in dict.fromkeys(key.brand_id for key in keys):
            brand = await self.brand_repository.find_by_id(brand_id)
            if brand is not None:
                brands[brand_id] = brand
        seats = await self.activation_repository.count_active_by_licenses(
            [license.id for license in licenses]
        )
        return _CustomerData(keys=keys, licenses=licenses, products=products, brands=brands, seats=seats)

    async def _require_brand(self, brand_id: uuid.UUID) -> Brand:
        brand = await self.brand_repository.find_by_id(brand_id)
        if brand is None:
            raise BrandNotFoundError(f"Brand {brand_id} not found")
        return brand


class GetCustomerLicensesHandler(_CustomerHandler):
    """Handler for GetCustomerLicensesQuery."""

    async def handle(self, query: GetCustomerLicensesQuery) -> CustomerLicensesDTO:
        """
        Handle get customer licenses query.

        Keys of deactivated brands are left out.

        Args:
            query: GetCustomerLicensesQuery

        Returns:
            CustomerLicensesDTO with keys, licenses and summaries

        Raises:
            ValidationError: If the email is malformed
        """
        email = str(Email(query.customer_email))
        keys = await self.license_key_repository.find_by_customer_email_across_brands(email)
        data = await self._load(keys)
        logger.info(
            "Customer licenses listed across brands",
            extra={"license_keys": len(keys), "brands": len(data.brands)},
        )
        return CustomerLicensesDTO(
            customer_email=email,
            total_license_keys=len(keys),
            total_licenses=len(data.licenses),
            brands_count=len(data.brands),
            brands=[BrandRefDTO.from_entity(brand) for brand in data.brands.values()],
            license_keys=data.key_dtos(),
            licenses_summary=CustomerLicenseAggregator.licenses_summary(data.licenses),
            products_summary=data.products_summary(),
        )


class GetCustomerBrandLicensesHandler(_CustomerHandler):
    """Handler for GetCustomerBrandLicensesQuery."""

    async def handle(self, query: GetCustomerBrandLicensesQuery) -> CustomerBrandLicensesDTO:
        email = str(Email(query.customer_email))
        brand = await self._require_brand(query.brand_id)
        keys = await self.license_key_repository.find_by_customer_email(brand.id, email)
        data = await self._load(keys)
        return CustomerBrandLicensesDTO(
            customer_email=email,
            brand=BrandRefDTO.from_entity(brand),
            license_keys_count=len(keys),
            licenses_count=len(data.licenses),
            license_keys=data.key_dtos(),
            licenses_summary=CustomerLicenseAggregator.licenses_summary(data.licenses),
            products_summary=data.products_summary(),
        )


class CheckProductAccessHandler(_CustomerHandler):
    """Handler for CheckProductAccessQuery."""

    async def handle(self, query: CheckProductAccessQuery) -> ProductAccessDTO:
        """
        Check whether a customer holds a usable license to a product.

        A license on an inactive key grants no access.

        Raises:
            BrandNotFoundError: If ``brand_id`` is given and unknown
            ValidationError: If the email is malformed
        """
        email = str(Email(query.customer_email))
        if query.brand_id is not None:
            brand = await self._require_brand(query.brand_id)
            keys = await self.license_key_repository.find_by_customer_email(brand.id, email)
        else:
            keys = await self.license_key_repository.find_by_customer_email_across_brands(email)
        keys = [key for key in keys if key.is_active]
        data = await self._load(keys)

        granting = CustomerLicenseAggregator.has_access(
            data.licenses, data.products, query.product_slug
        )
        return ProductAccessDTO(
            customer_email=email,
            product_slug=query.product_slug,
            has_access=bool(granting),
            licenses=[data.license_dto(license) for license in granting],
        )
