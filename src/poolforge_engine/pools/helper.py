"""Higher-level pool operations used when entitlements and subscriptions change."""

import logging
from typing import Optional

from poolforge_engine.catalog.ports import ProductCatalog
from poolforge_engine.common.config import PoolforgeSettings
from poolforge_engine.common.exceptions import BadRequestError
from poolforge_engine.pools.attributes import reconcile_attributes
from poolforge_engine.pools.factory import PoolFactory
from poolforge_engine.pools.models import Entitlement, Pool, Subscription
from poolforge_engine.pools.ports import PoolManager
from poolforge_engine.pools.quantity import QuantityInput, QuantityPolicy

logger = logging.getLogger(__name__)


class PoolHelper:
    """Pool operations available while handling one source entitlement.

    ``source_entitlement`` is the entitlement whose consumption triggered the
    work; pools built here record it as their source.
    """

    def __init__(
        self,
        pool_manager: PoolManager,
        product_catalog: ProductCatalog,
        source_entitlement: Optional[Entitlement] = None,
        quantity_policy: Optional[QuantityPolicy] = None,
        settings: Optional[PoolforgeSettings] = None,
    ):
        self.pool_manager = pool_manager
        self.source_entitlement = source_entitlement
        self.factory = PoolFactory(
            product_catalog, quantity_policy=quantity_policy, settings=settings,
        )

    def create_user_restricted_pool(
        self, product_id: str, pool: Pool, quantity: QuantityInput,
    ) -> Pool:
        """Create a pool for a product limited to one user's consumers.

        Owner, dates, contract details and provided products come from the
        template ``pool``. The new pool is submitted to the pool manager.
        """
        username = self._source_username()

        restricted = self.factory.create_pool(
            product_id,
            pool.owner,
            quantity,
            pool.start_date,
            pool.end_date,
            pool.contract_number,
            pool.account_number,
            pool.provided_products,
            source_entitlement=self.source_entitlement,
        )
        restricted.restricted_to_username = username

        logger.info(
            "Creating pool for product %s restricted to user %s", product_id, username,
        )
        return self.pool_manager.create_pool(restricted)

    def create_pool(
        self,
        subscription: Subscription,
        product_id: str,
        quantity: QuantityInput,
        extra_attributes: Optional[dict[str, str]] = None,
    ) -> Pool:
        return self.factory.create_pool_from_subscription(
            subscription,
            product_id,
            quantity,
            extra_attributes=extra_attributes,
            source_entitlement=self.source_entitlement,
        )

    def copy_provided_products(self, source: Subscription, destination: Pool) -> None:
        self.factory.copy_provided_products(source, destination)

    def collapse_attributes_onto_pool(self, subscription: Subscription, pool: Pool) -> bool:
        """Collapse the subscription product's attributes onto the pool.

        Returns True if the pool's cached attributes changed.
        """
        if subscription.product is None:
            raise BadRequestError("Subscription has no product")
        return reconcile_attributes(subscription.product, pool)

    def check_for_changed_products(self, existing_pool: Pool, subscription: Subscription) -> bool:
        """Return True if the pool's product graph has drifted from the subscription's.

        Compares the set of product ids (top-level plus provided) and the
        top-level product's name. A True result means the pool should be
        regenerated rather than reconciled in place.
        """
        if subscription.product is None:
            raise BadRequestError("Subscription has no product")

        pool_products = {existing_pool.product_id} | existing_pool.provided_product_ids()
        sub_products = {subscription.product.id} | {
            pp.id for pp in subscription.provided_products if pp is not None
        }

        if pool_products != sub_products:
            logger.debug(
                "Pool %s products %s differ from subscription %s products %s",
                existing_pool.id, sorted(pool_products, key=str), subscription.id,
                sorted(sub_products, key=str),
            )
            return True

        return existing_pool.product_name != subscription.product.name

    def _source_username(self) -> str:
        entitlement = self.source_entitlement
        if entitlement is None or entitlement.consumer is None:
            raise BadRequestError("No source entitlement consumer to restrict the pool to")
        if not entitlement.consumer.username:
            raise BadRequestError(
                f"Consumer {entitlement.consumer.uuid} has no owning username"
            )
        return entitlement.consumer.username
