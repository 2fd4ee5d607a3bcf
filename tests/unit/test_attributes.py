"""Tests for pools.attributes — product attribute reconciliation."""

from poolforge_engine.catalog.models import Product
from poolforge_engine.catalog.schemas import ProductData
from poolforge_engine.pools.attributes import (
    apply_attribute_diff,
    diff_attributes,
    reconcile_attributes,
)
from poolforge_engine.pools.models import Pool


def _snapshot(pool: Pool) -> dict:
    return {name: (a.value, a.product_id) for name, a in pool.product_attributes.items()}


class TestDiffAttributes:
    def test_empty_pool_everything_added(self):
        product = Product(id="P1", attributes={"a": "1", "b": "2"})
        diff = diff_attributes(product, Pool())
        assert diff.added == {"a", "b"}
        assert diff.updated == frozenset()
        assert diff.removed == frozenset()
        assert diff.changed is True

    def test_value_change_is_update(self):
        pool = Pool()
        pool.set_product_attribute("a", "1", "P1")
        diff = diff_attributes(Product(id="P1", attributes={"a": "2"}), pool)
        assert diff.updated == {"a"}
        assert not diff.added and not diff.removed

    def test_origin_change_is_update(self):
        pool = Pool()
        pool.set_product_attribute("a", "1", "PROVIDED")
        diff = diff_attributes(Product(id="P1", attributes={"a": "1"}), pool)
        assert diff.updated == {"a"}

    def test_stale_name_removed(self):
        pool = Pool()
        pool.set_product_attribute("gone", "x", "P1")
        diff = diff_attributes(Product(id="P1", attributes={}), pool)
        assert diff.removed == {"gone"}

    def test_no_change(self):
        pool = Pool()
        pool.set_product_attribute("a", "1", "P1")
        diff = diff_attributes(Product(id="P1", attributes={"a": "1"}), pool)
        assert diff.changed is False

    def test_diff_does_not_mutate_pool(self):
        pool = Pool()
        pool.set_product_attribute("gone", "x", "P1")
        diff_attributes(Product(id="P1", attributes={"new": "y"}), pool)
        assert _snapshot(pool) == {"gone": ("x", "P1")}

    def test_apply_diff(self):
        pool = Pool()
        pool.set_product_attribute("gone", "x", "P1")
        product = Product(id="P1", attributes={"new": "y"})
        apply_attribute_diff(diff_attributes(product, pool), product, pool)
        assert _snapshot(pool) == {"new": ("y", "P1")}


class TestReconcileAttributes:
    def test_populates_empty_pool(self):
        pool = Pool()
        changed = reconcile_attributes(Product(id="P1", attributes={"arch": "x86_64"}), pool)
        assert changed is True
        attr = pool.get_product_attribute("arch")
        assert attr.value == "x86_64"
        assert attr.product_id == "P1"

    def test_idempotent(self):
        product = Product(id="P1", attributes={"arch": "x86_64", "sockets": "4"})
        pool = Pool()
        assert reconcile_attributes(product, pool) is True
        before = _snapshot(pool)
        assert reconcile_attributes(product, pool) is False
        assert _snapshot(pool) == before

    def test_exact_mirror(self):
        pool = Pool()
        pool.set_product_attribute("stale", "1", "P1")
        pool.set_product_attribute("sockets", "2", "P1")
        pool.set_product_attribute("arch", "ppc64", "OTHER")
        product = Product(id="P1", attributes={"sockets": "8", "arch": "ppc64", "ram": "16"})

        assert reconcile_attributes(product, pool) is True
        assert _snapshot(pool) == {
            "sockets": ("8", "P1"),
            "arch": ("ppc64", "P1"),
            "ram": ("16", "P1"),
        }

    def test_only_removals_reported_as_change(self):
        pool = Pool()
        pool.set_product_attribute("a", "1", "P1")
        pool.set_product_attribute("b", "2", "P1")
        assert reconcile_attributes(Product(id="P1", attributes={"a": "1"}), pool) is True
        assert set(pool.product_attributes) == {"a"}

    def test_pool_attributes_untouched(self):
        pool = Pool()
        pool.set_attribute("requires_consumer_type", "system")
        reconcile_attributes(Product(id="P1", attributes={}), pool)
        assert pool.get_attribute("requires_consumer_type") == "system"

    def test_accepts_detached_product_data(self):
        pool = Pool()
        data = ProductData(id="P1", attributes={"arch": "s390x"})
        assert reconcile_attributes(data, pool) is True
        assert _snapshot(pool) == {"arch": ("s390x", "P1")}
