"""
vendorhub/models/catalog.py

Purpose: Catalog record kinds

- Products and services share one repository; each kind is described here
- Field lists, collection names and user-facing labels
- Single source of truth for what a kind's documents look like
"""

from dataclasses import dataclass
from typing import Tuple

from vendorhub.db.mongo import PRODUCTS_COLLECTION, SERVICES_COLLECTION


# Attachment reference fields carried by every catalog record
ATTACHMENT_FIELDS = ("images", "videos")

# Owner reference, immutable after creation
OWNER_FIELD = "userId"


@dataclass(frozen=True)
class CatalogKind:
    """
    Describes one catalog record kind.
    """
    name: str
    label: str
    collection: str
    fields: Tuple[str, ...]
    id_key: str
    # Listing zero records is reported as "not found" rather than []
    empty_list_not_found: bool = False

    @property
    def updatable_fields(self) -> Tuple[str, ...]:
        return self.fields + ATTACHMENT_FIELDS


PRODUCT = CatalogKind(
    name="product",
    label="Product",
    collection=PRODUCTS_COLLECTION,
    fields=(
        "productName",
        "productDescription",
        "productCategory",
        "productSubcategory",
        "price",
        "stockAvailability",
        "productPolicies",
    ),
    id_key="productId",
)

SERVICE = CatalogKind(
    name="service",
    label="Service",
    collection=SERVICES_COLLECTION,
    fields=(
        "serviceName",
        "serviceCategory",
        "location",
        "description_ser",
        "lowestAmount",
        "highestAmount",
        "selectedServices",
        "selectedEventTypes",
    ),
    id_key="serviceId",
    empty_list_not_found=True,
)
