"""Product attribute reconciliation onto pools.

A pool caches its top-level product's attributes, each tagged with the id
of the product it came from. Reconciliation makes that cache mirror the
product exactly:

- names on the product but not on the pool are *added*
- names on both whose value or originating product differ are *updated*
- names on the pool but no longer on the product are *removed*

The diff is computed as a value first and applied second, so callers can
inspect what would change before touching the pool.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Protocol

from poolforge_engine.pools.models import Pool

logger = logging.getLogger(__name__)


class AttributeSource(Protocol):
    """Anything carrying an id and an attribute mapping (Product, ProductData)."""
    id: Optional[str]
    attributes: dict[str, str]


@dataclass(frozen=True)
class AttributeDiff:
    """Disjoint name sets describing how a pool's cache differs from a product."""
    added: frozenset[str] = field(default_factory=frozenset)
    updated: frozenset[str] = field(default_factory=frozenset)
    removed: frozenset[str] = field(default_factory=frozenset)

    @property
    def changed(self) -> bool:
        return bool(self.added or self.updated or self.removed)


def diff_attributes(product: AttributeSource, pool: Pool) -> AttributeDiff:
    """Compare a product's attributes with the pool's cached copy."""
    current = product.attributes or {}
    cached = pool.product_attributes

    added = set()
    updated = set()
    for name, value in current.items():
        existing = cached.get(name)
        if existing is None:
            added.add(name)
        elif existing.product_id != product.id or existing.value != value:
            updated.add(name)

    removed = set(cached) - set(current)

    return AttributeDiff(
        added=frozenset(added),
        updated=frozenset(updated),
        removed=frozenset(removed),
    )


def apply_attribute_diff(diff: AttributeDiff, product: AttributeSource, pool: Pool) -> None:
    """Write a previously computed diff onto the pool."""
    for name in diff.added | diff.updated:
        pool.set_product_attribute(name, product.attributes[name], product.id)
    for name in diff.removed:
        pool.remove_product_attribute(name)


def reconcile_attributes(product: AttributeSource, pool: Pool) -> bool:
    """Collapse the product's attributes onto the pool.

    Only the top-level product's attributes are considered.

    Returns:
        True if any attribute was added, updated or removed.
    """
    diff = diff_attributes(product, pool)
    if not diff.changed:
        return False

    apply_attribute_diff(diff, product, pool)
    logger.debug(
        "Reconciled attributes of product %s onto pool %s: +%d ~%d -%d",
        product.id, pool.id, len(diff.added), len(diff.updated), len(diff.removed),
    )
    return True
