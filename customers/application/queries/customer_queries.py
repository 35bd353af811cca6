"""
Customer read queries.

Customers are identified by email value only; there is no customer
entity.
"""
import uuid
from dataclasses import dataclass
from typing import Optional


@dataclass
class GetCustomerLicensesQuery:
    """Query for a customer's licenses across every active brand."""

    customer_email: str


@dataclass
class GetCustomerBrandLicensesQuery:
    """Query for a customer's licenses within one brand."""

    customer_email: str
    brand_id: uuid.UUID


@dataclass
class CheckProductAccessQuery:
    """
    Query whether a customer holds a usable license to a product.

    Without ``brand_id`` every active brand is searched.
    """

    customer_email: str
    product_slug: str
    brand_id: Optional[uuid.UUID] = None
