"""
vendorhub/schemas/catalog.py

Purpose: Catalog request/response shaping

- Partial update bodies for products and services
- Mongo document -> JSON conversion (ObjectId -> str)
"""

from typing import Any, Dict, List, Optional, Union

from bson import ObjectId
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, ConfigDict


Number = Union[float, str]
StringList = Union[List[str], str]


class CatalogUpdate(BaseModel):
    """Fields shared by every kind's update body."""

    model_config = ConfigDict(extra="ignore")

    images: Optional[List[str]] = None
    videos: Optional[List[str]] = None

    def supplied_fields(self) -> Dict[str, Any]:
        """Only the fields present in the request, explicit nulls included."""
        return self.model_dump(exclude_unset=True)


class ProductUpdate(CatalogUpdate):
    productName: Optional[str] = None
    productDescription: Optional[str] = None
    productCategory: Optional[str] = None
    productSubcategory: Optional[str] = None
    price: Optional[Number] = None
    stockAvailability: Optional[Union[int, str]] = None
    productPolicies: Optional[str] = None


class ServiceUpdate(CatalogUpdate):
    serviceName: Optional[str] = None
    serviceCategory: Optional[str] = None
    location: Optional[str] = None
    description_ser: Optional[str] = None
    lowestAmount: Optional[Number] = None
    highestAmount: Optional[Number] = None
    selectedServices: Optional[StringList] = None
    selectedEventTypes: Optional[StringList] = None


UPDATE_SCHEMAS = {
    "product": ProductUpdate,
    "service": ServiceUpdate,
}


def serialize_document(document: Any) -> Any:
    """Converts Mongo documents (or lists of them) into JSON-safe values."""
    return jsonable_encoder(document, custom_encoder={ObjectId: str})
