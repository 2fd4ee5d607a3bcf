"""Pydantic schemas for detached product data and catalog files."""

from typing import Optional

from pydantic import BaseModel, Field

from poolforge_engine.catalog.models import Product


class ProductData(BaseModel):
    """Detached product data as received from outside the engine.

    At least one of ``uuid`` or ``id`` must be set for the data to resolve.
    """
    uuid: Optional[str] = None
    id: Optional[str] = None
    name: Optional[str] = None
    multiplier: Optional[int] = None
    attributes: dict[str, str] = {}
    dependent_product_ids: set[str] = set()

    @classmethod
    def from_product(cls, product: Product) -> "ProductData":
        return cls(
            uuid=product.uuid,
            id=product.id,
            name=product.name,
            multiplier=product.multiplier,
            attributes=dict(product.attributes),
            dependent_product_ids=set(product.dependent_product_ids),
        )


class OwnerRef(BaseModel):
    id: Optional[str] = None
    key: Optional[str] = None


class ProductEntry(BaseModel):
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    uuid: Optional[str] = None
    multiplier: int = Field(default=1, ge=1)
    attributes: dict[str, str] = {}
    dependent_product_ids: list[str] = []
    provided_product_ids: list[str] = []
    derived_product_id: Optional[str] = None


class OwnerEntry(BaseModel):
    id: str = Field(..., min_length=1)
    key: str = Field(..., min_length=1)
    display_name: str = ""
    products: list[ProductEntry] = []


class CatalogFile(BaseModel):
    """On-disk catalog: owners with their product graphs."""
    owners: list[OwnerEntry] = []
