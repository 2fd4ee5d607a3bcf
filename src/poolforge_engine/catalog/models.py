"""Domain models for owners and products."""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class Owner:
    """A tenant organization.

    An unresolved reference is an Owner carrying only ``key`` and/or ``id``;
    the resolver swaps it for the stored instance.
    """
    id: Optional[str] = None
    key: Optional[str] = None
    display_name: str = ""


@dataclass
class Product:
    """A sellable unit, scoped to an owner by ``id`` and global by ``uuid``."""
    id: Optional[str] = None
    name: str = ""
    uuid: Optional[str] = None
    multiplier: int = 1
    attributes: dict[str, str] = field(default_factory=dict)
    dependent_product_ids: set[str] = field(default_factory=set)
    provided_products: list["Product"] = field(default_factory=list)
    derived_product: Optional["Product"] = None

    def has_attribute(self, name: str) -> bool:
        return name in self.attributes

    def get_attribute(self, name: str) -> Optional[str]:
        return self.attributes.get(name)
