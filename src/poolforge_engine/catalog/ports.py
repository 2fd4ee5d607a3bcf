"""Lookup contracts the engine consumes."""

from typing import Optional, Protocol, runtime_checkable

from poolforge_engine.catalog.models import Owner, Product


@runtime_checkable
class OwnerLookup(Protocol):
    """Authoritative owner store."""

    def lookup_by_key(self, key: str) -> Optional[Owner]: ...

    def find(self, owner_id: str) -> Optional[Owner]: ...


@runtime_checkable
class ProductLookup(Protocol):
    """Authoritative product store, scoped by owner or global by uuid."""

    def get_owner_product(self, owner: Owner, product_id: str) -> Optional[Product]: ...

    def find_by_uuid(self, uuid: str) -> Optional[Product]: ...


@runtime_checkable
class ProductCatalog(Protocol):
    """External product catalog used to snapshot display names.

    Implementations raise rather than return None for unknown ids.
    """

    def get_product_by_id(self, product_id: str) -> Product: ...
