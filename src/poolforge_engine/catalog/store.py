"""In-memory reference store implementing the engine's collaborator contracts."""

import json
import logging
import uuid
from pathlib import Path
from typing import Optional, Union

from poolforge_engine.catalog.models import Owner, Product
from poolforge_engine.catalog.schemas import CatalogFile, OwnerEntry
from poolforge_engine.common.exceptions import BadRequestError, NotFoundError
from poolforge_engine.pools.models import Pool

logger = logging.getLogger(__name__)


def generate_uuid() -> str:
    return uuid.uuid4().hex


class InMemoryStore:
    """Owners, owner-scoped products and created pools held in dictionaries.

    Satisfies OwnerLookup, ProductLookup, ProductCatalog and PoolManager.
    Owners may each register a product with the same id, but the catalog
    view keeps one entry per id, so those registrations must agree on the
    product name.
    """

    def __init__(self) -> None:
        self._owners_by_id: dict[str, Owner] = {}
        self._owners_by_key: dict[str, Owner] = {}
        self._products: dict[tuple[str, str], Product] = {}
        self._products_by_uuid: dict[str, Product] = {}
        self._catalog: dict[str, Product] = {}
        self.pools: list[Pool] = []

    # ── Registration ──

    def add_owner(self, owner: Owner) -> Owner:
        if owner.id is None:
            owner.id = generate_uuid()
        self._owners_by_id[owner.id] = owner
        if owner.key is not None:
            self._owners_by_key[owner.key] = owner
        return owner

    def add_product(self, owner: Owner, product: Product) -> Product:
        if owner.id not in self._owners_by_id:
            raise NotFoundError(f'Owner "{owner.key}" is not registered')

        for (owner_id, product_id), other in self._products.items():
            if owner_id != owner.id and product_id == product.id and other.name != product.name:
                raise BadRequestError(
                    f'Product "{product.id}" is already registered as "{other.name}", '
                    f'not "{product.name}"'
                )

        if product.uuid is None:
            product.uuid = generate_uuid()
        self._products[(owner.id, product.id)] = product
        self._products_by_uuid[product.uuid] = product
        self._catalog.setdefault(product.id, product)
        if self._catalog[product.id].name != product.name:
            self._catalog[product.id] = product
        return product

    # ── OwnerLookup ──

    def lookup_by_key(self, key: str) -> Optional[Owner]:
        return self._owners_by_key.get(key)

    def find(self, owner_id: str) -> Optional[Owner]:
        return self._owners_by_id.get(owner_id)

    # ── ProductLookup ──

    def get_owner_product(self, owner: Owner, product_id: str) -> Optional[Product]:
        return self._products.get((owner.id, product_id))

    def find_by_uuid(self, uuid: str) -> Optional[Product]:
        return self._products_by_uuid.get(uuid)

    # ── ProductCatalog ──

    def get_product_by_id(self, product_id: str) -> Product:
        product = self._catalog.get(product_id)
        if product is None:
            raise NotFoundError(f'Unable to find a product with the ID "{product_id}"')
        return product

    # ── PoolManager ──

    def create_pool(self, pool: Pool) -> Pool:
        if pool.id is None:
            pool.id = generate_uuid()
        self.pools.append(pool)
        logger.info("Stored pool %s for product %s", pool.id, pool.product_id)
        return pool


def _register_owner(store: InMemoryStore, entry: OwnerEntry) -> None:
    owner = store.add_owner(Owner(id=entry.id, key=entry.key, display_name=entry.display_name))

    products = {
        p.id: Product(
            id=p.id,
            name=p.name,
            uuid=p.uuid,
            multiplier=p.multiplier,
            attributes=dict(p.attributes),
            dependent_product_ids=set(p.dependent_product_ids),
        )
        for p in entry.products
    }

    # Link the product graph once every product of the owner exists.
    for p in entry.products:
        product = products[p.id]
        for provided_id in p.provided_product_ids:
            if provided_id not in products:
                raise NotFoundError(
                    f'Product "{p.id}" provides unknown product "{provided_id}" '
                    f'for owner "{entry.key}"'
                )
            product.provided_products.append(products[provided_id])
        if p.derived_product_id is not None:
            if p.derived_product_id not in products:
                raise NotFoundError(
                    f'Product "{p.id}" derives unknown product "{p.derived_product_id}" '
                    f'for owner "{entry.key}"'
                )
            product.derived_product = products[p.derived_product_id]

    for product in products.values():
        store.add_product(owner, product)


def build_store(catalog: CatalogFile) -> InMemoryStore:
    store = InMemoryStore()
    for entry in catalog.owners:
        _register_owner(store, entry)
    return store


def load_catalog(path: Union[str, Path]) -> InMemoryStore:
    """Read a JSON catalog file into a new store."""
    raw = json.loads(Path(path).read_text())
    catalog = CatalogFile.model_validate(raw)
    store = build_store(catalog)
    logger.info("Loaded catalog %s with %d owner(s)", path, len(catalog.owners))
    return store
