"""Persistence contract for derived pools."""

from typing import Protocol, runtime_checkable

from poolforge_engine.pools.models import Pool


@runtime_checkable
class PoolManager(Protocol):
    """Accepts pools that are ready to be persisted."""

    def create_pool(self, pool: Pool) -> Pool: ...
