"""Pydantic schemas for subscription and pool documents."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from poolforge_engine.catalog.models import Owner
from poolforge_engine.catalog.schemas import OwnerRef, ProductData
from poolforge_engine.pools.models import Pool, ProvidedProduct, Subscription


class SubscriptionIn(BaseModel):
    id: Optional[str] = None
    owner: Optional[OwnerRef] = None
    product: Optional[ProductData] = None
    derived_product: Optional[ProductData] = None
    provided_products: list[ProductData] = []
    derived_provided_products: list[ProductData] = []
    quantity: int = Field(default=0, ge=-1)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    contract_number: Optional[str] = None
    account_number: Optional[str] = None

    def to_subscription(self) -> Subscription:
        return Subscription(
            id=self.id,
            owner=Owner(id=self.owner.id, key=self.owner.key) if self.owner else None,
            product=self.product,
            derived_product=self.derived_product,
            provided_products=list(self.provided_products),
            derived_provided_products=list(self.derived_provided_products),
            quantity=self.quantity,
            start_date=self.start_date,
            end_date=self.end_date,
            contract_number=self.contract_number,
            account_number=self.account_number,
        )


class ProvidedProductSchema(BaseModel):
    product_id: str
    product_name: str = ""

    model_config = {"from_attributes": True}


class PoolIn(BaseModel):
    """An existing pool as stored by the persistence layer."""
    id: Optional[str] = None
    owner: Optional[OwnerRef] = None
    product_id: str
    product_name: str = ""
    provided_products: list[ProvidedProductSchema] = []
    quantity: int = 0

    def to_pool(self) -> Pool:
        return Pool(
            id=self.id,
            owner=Owner(id=self.owner.id, key=self.owner.key) if self.owner else None,
            product_id=self.product_id,
            product_name=self.product_name,
            quantity=self.quantity,
            provided_products=[
                ProvidedProduct(pp.product_id, pp.product_name) for pp in self.provided_products
            ],
        )


class OwnerResponse(BaseModel):
    id: Optional[str] = None
    key: Optional[str] = None
    display_name: str = ""

    model_config = {"from_attributes": True}


class ProductAttributeResponse(BaseModel):
    name: str
    value: str
    product_id: str

    model_config = {"from_attributes": True}


class PoolResponse(BaseModel):
    id: Optional[str] = None
    owner: Optional[OwnerResponse] = None
    product_id: Optional[str] = None
    product_name: str
    quantity: int
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    contract_number: Optional[str] = None
    account_number: Optional[str] = None
    subscription_id: Optional[str] = None
    source_entitlement_id: Optional[str] = None
    restricted_to_username: Optional[str] = None
    provided_products: list[ProvidedProductSchema]
    attributes: dict[str, str]
    product_attributes: dict[str, ProductAttributeResponse]

    model_config = {"from_attributes": True}
