"""Domain models for pools, subscriptions and entitlements."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from poolforge_engine.catalog.models import Owner, Product
from poolforge_engine.catalog.schemas import ProductData

UNLIMITED_QUANTITY = -1


@dataclass
class ProvidedProduct:
    """A pool's own copy of a provided product's id and name."""
    product_id: str
    product_name: str = ""


@dataclass
class ProductPoolAttribute:
    """A product attribute cached on a pool, tagged with its source product."""
    name: str
    value: str
    product_id: str


@dataclass
class Consumer:
    uuid: str
    name: str = ""
    username: Optional[str] = None
    owner: Optional[Owner] = None


@dataclass
class EntitlementCertificate:
    """Certificate issued for an entitlement.

    Holds only the entitlement id; the entitlement owns its certificates.
    """
    id: Optional[str] = None
    entitlement_id: Optional[str] = None
    serial: Optional[int] = None
    key: str = ""
    cert: str = ""
    revoked: bool = False

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, EntitlementCertificate):
            return NotImplemented
        return self.id == other.id and self.entitlement_id == other.entitlement_id

    def __hash__(self) -> int:
        return hash(self.id) if self.id is not None else 0


@dataclass
class Entitlement:
    """A consumer's claim against a pool."""
    id: str
    consumer: Optional[Consumer] = None
    pool_id: Optional[str] = None
    quantity: int = 1
    certificates: list[EntitlementCertificate] = field(default_factory=list)

    def add_certificate(self, certificate: EntitlementCertificate) -> None:
        certificate.entitlement_id = self.id
        if certificate not in self.certificates:
            self.certificates.append(certificate)

    def remove_certificate(self, certificate: EntitlementCertificate) -> None:
        if certificate in self.certificates:
            self.certificates.remove(certificate)
        certificate.entitlement_id = None


@dataclass
class Subscription:
    """The commercial agreement backing one or more pools."""
    id: Optional[str] = None
    owner: Optional[Owner] = None
    product: Optional[ProductData] = None
    derived_product: Optional[ProductData] = None
    provided_products: list[ProductData] = field(default_factory=list)
    derived_provided_products: list[ProductData] = field(default_factory=list)
    quantity: int = 0
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    contract_number: Optional[str] = None
    account_number: Optional[str] = None


@dataclass
class Pool:
    """A time-bounded grant of entitlement capacity for one product."""
    owner: Optional[Owner] = None
    product_id: Optional[str] = None
    product_name: str = ""
    quantity: int = 0
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    contract_number: Optional[str] = None
    account_number: Optional[str] = None
    id: Optional[str] = None
    product: Optional[Product] = None
    derived_product: Optional[Product] = None
    provided_products: list[ProvidedProduct] = field(default_factory=list)
    derived_provided_products: list[ProvidedProduct] = field(default_factory=list)
    subscription_id: Optional[str] = None
    source_entitlement_id: Optional[str] = None
    restricted_to_username: Optional[str] = None
    attributes: dict[str, str] = field(default_factory=dict)
    product_attributes: dict[str, ProductPoolAttribute] = field(default_factory=dict)

    @property
    def is_unlimited(self) -> bool:
        return self.quantity == UNLIMITED_QUANTITY

    # ── Provided products ──

    def add_provided_product(self, provided: ProvidedProduct) -> None:
        if not self.provides(provided.product_id):
            self.provided_products.append(provided)

    def provides(self, product_id: str) -> bool:
        return any(pp.product_id == product_id for pp in self.provided_products)

    def provided_product_ids(self) -> set[str]:
        return {pp.product_id for pp in self.provided_products}

    # ── Pool attributes ──

    def set_attribute(self, name: str, value: str) -> None:
        self.attributes[name] = value

    def get_attribute(self, name: str) -> Optional[str]:
        return self.attributes.get(name)

    # ── Product-provided attributes ──

    def has_product_attribute(self, name: str) -> bool:
        return name in self.product_attributes

    def get_product_attribute(self, name: str) -> Optional[ProductPoolAttribute]:
        return self.product_attributes.get(name)

    def set_product_attribute(self, name: str, value: str, product_id: str) -> None:
        self.product_attributes[name] = ProductPoolAttribute(
            name=name, value=value, product_id=product_id,
        )

    def remove_product_attribute(self, name: str) -> None:
        self.product_attributes.pop(name, None)
