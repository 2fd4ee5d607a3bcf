"""Pool construction from subscriptions or explicit parameters."""

import logging
from datetime import datetime
from typing import Iterable, Optional

from poolforge_engine.catalog.models import Owner
from poolforge_engine.catalog.ports import ProductCatalog
from poolforge_engine.common.config import PoolforgeSettings, get_settings
from poolforge_engine.pools.attributes import reconcile_attributes
from poolforge_engine.pools.models import (
    Entitlement,
    Pool,
    ProvidedProduct,
    Subscription,
)
from poolforge_engine.pools.quantity import QuantityInput, QuantityPolicy, get_quantity_policy

logger = logging.getLogger(__name__)

REQUIRES_CONSUMER_TYPE = "requires_consumer_type"


class PoolFactory:
    """Builds pool entities ready to hand to a PoolManager."""

    def __init__(
        self,
        product_catalog: ProductCatalog,
        quantity_policy: Optional[QuantityPolicy] = None,
        settings: Optional[PoolforgeSettings] = None,
    ):
        self.settings = settings or get_settings()
        self.product_catalog = product_catalog
        self.quantity_policy = quantity_policy or get_quantity_policy(
            self.settings.quantity_policy, self.settings.unlimited_token,
        )

    def create_pool(
        self,
        product_id: str,
        owner: Owner,
        quantity: QuantityInput,
        start_date: Optional[datetime],
        end_date: Optional[datetime],
        contract_number: Optional[str],
        account_number: Optional[str],
        provided_products: Iterable[ProvidedProduct] = (),
        source_entitlement: Optional[Entitlement] = None,
    ) -> Pool:
        """Create a pool for a product from explicit parameters.

        The product name is snapshotted from the product catalog, and the
        provided products are copied so the new pool never shares entries
        with the caller.
        """
        parsed_quantity = self.quantity_policy(quantity)
        product = self.product_catalog.get_product_by_id(product_id)

        pool = Pool(
            owner=owner,
            product_id=product_id,
            product_name=product.name,
            quantity=parsed_quantity,
            start_date=start_date,
            end_date=end_date,
            contract_number=contract_number,
            account_number=account_number,
        )

        for provided in provided_products:
            pool.add_provided_product(
                ProvidedProduct(provided.product_id, provided.product_name)
            )

        if source_entitlement is not None:
            pool.source_entitlement_id = source_entitlement.id

        # TODO: drop once products can declare their required consumer type
        pool.set_attribute(REQUIRES_CONSUMER_TYPE, self.settings.default_consumer_type)

        logger.debug(
            "Built pool for product %s (owner=%s, quantity=%d)",
            product_id, owner.key if owner else None, parsed_quantity,
        )
        return pool

    def create_pool_from_subscription(
        self,
        subscription: Subscription,
        product_id: str,
        quantity: QuantityInput,
        extra_attributes: Optional[dict[str, str]] = None,
        source_entitlement: Optional[Entitlement] = None,
    ) -> Pool:
        """Create a pool backed by a subscription.

        Extra attributes are layered on first, then the subscription
        product's attributes are collapsed onto the pool.
        """
        pool = self.create_pool(
            product_id,
            subscription.owner,
            quantity,
            subscription.start_date,
            subscription.end_date,
            subscription.contract_number,
            subscription.account_number,
            source_entitlement=source_entitlement,
        )
        pool.subscription_id = subscription.id

        self.copy_provided_products(subscription, pool)

        for name, value in (extra_attributes or {}).items():
            pool.set_attribute(name, value)

        if subscription.product is not None:
            reconcile_attributes(subscription.product, pool)

        logger.info(
            "Created pool for subscription %s (product=%s, provided=%d)",
            subscription.id, product_id, len(pool.provided_products),
        )
        return pool

    def copy_provided_products(self, source: Subscription, destination: Pool) -> None:
        """Copy a subscription's provided products onto a pool, skipping absent entries."""
        for provided in source.provided_products:
            if provided is None:
                continue
            destination.add_provided_product(
                ProvidedProduct(provided.id, provided.name or "")
            )
