"""Shared test fixtures for Poolforge-Engine."""

import logging
from datetime import datetime, timezone

import pytest

from poolforge_engine.catalog.models import Owner, Product
from poolforge_engine.catalog.store import InMemoryStore
from poolforge_engine.common.config import PoolforgeSettings


START = datetime(2026, 1, 1, tzinfo=timezone.utc)
END = datetime(2027, 1, 1, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch):
    """Make every test see default settings, free of the caller's environment."""
    for var in (
        "POOLFORGE_QUANTITY_POLICY",
        "POOLFORGE_ENVIRONMENT",
        "POOLFORGE_LOG_LEVEL",
        "POOLFORGE_UNLIMITED_TOKEN",
        "POOLFORGE_DEFAULT_CONSUMER_TYPE",
    ):
        monkeypatch.delenv(var, raising=False)

    from poolforge_engine.common.config import get_settings
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()

    # CLI runs install a JSON handler; undo it so caplog keeps working.
    root = logging.getLogger("poolforge_engine")
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.propagate = True
    root.setLevel(logging.NOTSET)


@pytest.fixture
def settings():
    return PoolforgeSettings()


@pytest.fixture
def store():
    """Two owners sharing a product id, with one full product graph for acme."""
    store = InMemoryStore()
    acme = store.add_owner(Owner(id="owner-1", key="acme", display_name="Acme Corp"))
    globex = store.add_owner(Owner(id="owner-2", key="globex", display_name="Globex"))

    bits = Product(id="37060", name="Server Bits", uuid="uuid-37060")
    extras = Product(id="37061", name="Server Extras", uuid="uuid-37061")
    guest_bits = Product(id="37070", name="Guest Bits", uuid="uuid-37070")
    guest = Product(
        id="RH00049", name="Guest Server", uuid="uuid-rh49",
        provided_products=[guest_bits],
    )
    server = Product(
        id="RH00001",
        name="Premium Server",
        uuid="uuid-rh1",
        attributes={"arch": "x86_64", "sockets": "2"},
        provided_products=[bits, extras],
        derived_product=guest,
    )
    for product in (bits, extras, guest_bits, guest, server):
        store.add_product(acme, product)

    store.add_product(globex, Product(
        id="RH00001", name="Premium Server", uuid="uuid-globex-rh1",
        attributes={"arch": "aarch64"},
    ))
    return store


@pytest.fixture
def acme(store):
    return store.lookup_by_key("acme")
