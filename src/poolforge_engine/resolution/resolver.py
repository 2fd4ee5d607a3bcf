"""Resolution of owner, product, pool and subscription references.

Callers hand in loosely identified objects (an owner with only a key, a
product with only an id) and get back stored, fully populated entities.
Every method either returns a resolved value or raises:

- BadRequestError when the reference lacks identifying information
- NotFoundError when a well-formed reference does not exist

The first failure in traversal order is raised; nothing is partially
applied to the object being resolved.
"""

import logging
from typing import Iterable, Optional, Union

from poolforge_engine.catalog.models import Owner, Product
from poolforge_engine.catalog.ports import OwnerLookup, ProductLookup
from poolforge_engine.catalog.schemas import ProductData
from poolforge_engine.common.exceptions import BadRequestError, NotFoundError
from poolforge_engine.pools.models import Pool, ProvidedProduct, Subscription

logger = logging.getLogger(__name__)

ProductRef = Union[Product, ProductData, str, None]

NO_PRODUCT_MESSAGE = "No product specified, or product lacks identifying information"


class ReferenceResolver:
    """Resolves and validates references against the authoritative stores."""

    def __init__(self, owner_lookup: OwnerLookup, product_lookup: ProductLookup):
        self.owner_lookup = owner_lookup
        self.product_lookup = product_lookup

    # ── Owners ──

    def resolve_owner(self, owner: Optional[Owner]) -> Owner:
        """Resolve an owner by key, falling back to id when no key is given."""
        if owner is None or (owner.key is None and owner.id is None):
            raise BadRequestError("No owner specified, or owner lacks identifying information")

        if owner.key is not None:
            resolved = self.owner_lookup.lookup_by_key(owner.key)
            if resolved is None:
                raise NotFoundError(f'Unable to find an owner with the key "{owner.key}"')
        else:
            resolved = self.owner_lookup.find(owner.id)
            if resolved is None:
                raise NotFoundError(f'Unable to find an owner with the ID "{owner.id}"')

        return resolved

    # ── Products ──

    def resolve_product(self, owner: Owner, product: ProductRef) -> Product:
        """Resolve a product reference (object or bare id) scoped to ``owner``."""
        product_id = product if isinstance(product, str) or product is None else product.id
        if product_id is None:
            raise BadRequestError(NO_PRODUCT_MESSAGE)

        return self.find_product(owner, product_id)

    def find_product(self, owner: Owner, product_id: str) -> Product:
        product = self.product_lookup.get_owner_product(owner, product_id)
        if product is None:
            raise NotFoundError(
                f'Unable to find a product with the ID "{product_id}" for owner "{owner.key}"'
            )
        logger.debug("Resolved product %s for owner %s", product_id, owner.key)
        return product

    def _resolve_provided(
        self, owner: Owner, provided: Iterable[ProvidedProduct],
    ) -> list[ProvidedProduct]:
        """Resolve provided product entries into fresh, de-duplicated copies."""
        resolved: dict[str, Product] = {}
        for entry in provided:
            product = self.resolve_product(owner, entry.product_id)
            resolved.setdefault(product.id, product)
        return [ProvidedProduct(p.id, p.name) for p in resolved.values()]

    # ── Pools ──

    def resolve_pool(self, pool: Optional[Pool]) -> Pool:
        """Resolve a pool's owner and its whole product graph.

        The backing subscription is not checked; pools may be resolved
        before their subscription has been persisted.
        """
        if pool is None:
            raise BadRequestError("No pool specified")

        owner = self.resolve_owner(pool.owner)
        product = self.resolve_product(
            owner, pool.product if pool.product is not None else pool.product_id,
        )

        derived_product = None
        if pool.derived_product is not None:
            derived_product = self.resolve_product(owner, pool.derived_product)

        provided = self._resolve_provided(owner, pool.provided_products)
        derived_provided = self._resolve_provided(owner, pool.derived_provided_products)

        pool.owner = owner
        pool.product = product
        pool.product_id = product.id
        pool.product_name = product.name
        pool.derived_product = derived_product
        pool.provided_products = provided
        pool.derived_provided_products = derived_provided

        logger.debug(
            "Resolved pool %s: product=%s provided=%d derived_provided=%d",
            pool.id, product.id, len(provided), len(derived_provided),
        )
        return pool

    # ── Subscriptions ──

    def validate_product_data(
        self, product_data: Optional[ProductData], owner: Owner, allow_null: bool,
    ) -> None:
        """Check that detached product data refers to an existing product.

        A uuid is resolved globally and back-fills the data's id; otherwise
        the id is resolved within ``owner``. Absent data is accepted only
        when ``allow_null`` is set.
        """
        product = self._check_product_data(product_data, owner, allow_null)
        if product is not None and product_data.uuid is not None:
            product_data.id = product.id

    def _check_product_data(
        self, product_data: Optional[ProductData], owner: Owner, allow_null: bool,
    ) -> Optional[Product]:
        """Return the stored product ``product_data`` names, without touching it."""
        if product_data is None:
            if not allow_null:
                raise BadRequestError(NO_PRODUCT_MESSAGE)
            return None

        if product_data.uuid is not None:
            product = self.product_lookup.find_by_uuid(product_data.uuid)
            if product is None:
                raise NotFoundError(
                    f'Unable to find a product with the UUID "{product_data.uuid}"'
                )
            return product

        if product_data.id is None:
            raise BadRequestError(NO_PRODUCT_MESSAGE)

        product = self.product_lookup.get_owner_product(owner, product_data.id)
        if product is None:
            raise NotFoundError(
                f'Unable to find a product with the ID "{product_data.id}" '
                f'for owner "{owner.key}"'
            )
        return product

    def resolve_subscription(self, subscription: Optional[Subscription]) -> Subscription:
        """Resolve a subscription's owner and validate every product it names.

        The subscription itself is not looked up; it may not exist yet.
        Uuid back-fills, the owner and the provided collections (with absent
        entries dropped) are applied only once every product has validated.
        """
        if subscription is None:
            raise BadRequestError("No subscription specified")

        owner = self.resolve_owner(subscription.owner)

        checks = [(subscription.product, False), (subscription.derived_product, True)]
        checks += [(pd, True) for pd in subscription.provided_products]
        checks += [(pd, True) for pd in subscription.derived_provided_products]

        backfills = []
        for product_data, allow_null in checks:
            product = self._check_product_data(product_data, owner, allow_null)
            if product is not None and product_data.uuid is not None:
                backfills.append((product_data, product.id))

        for product_data, product_id in backfills:
            product_data.id = product_id

        subscription.provided_products = [
            pd for pd in subscription.provided_products if pd is not None
        ]
        subscription.derived_provided_products = [
            pd for pd in subscription.derived_provided_products if pd is not None
        ]
        subscription.owner = owner
        logger.debug("Resolved subscription %s for owner %s", subscription.id, owner.key)
        return subscription
