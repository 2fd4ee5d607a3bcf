"""Poolforge-Engine: entitlement pool derivation and reference resolution."""

from poolforge_engine.catalog.store import InMemoryStore, load_catalog
from poolforge_engine.pools.attributes import diff_attributes, reconcile_attributes
from poolforge_engine.pools.factory import PoolFactory
from poolforge_engine.pools.helper import PoolHelper
from poolforge_engine.pools.quantity import lenient_quantity, strict_quantity
from poolforge_engine.resolution.resolver import ReferenceResolver

__all__ = [
    "InMemoryStore",
    "load_catalog",
    "diff_attributes",
    "reconcile_attributes",
    "PoolFactory",
    "PoolHelper",
    "lenient_quantity",
    "strict_quantity",
    "ReferenceResolver",
]
__version__ = "0.1.0"
