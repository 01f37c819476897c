"""Unit tests for metric catalog."""

from rrd_connector.application.services.catalog import CatalogStore, MetricCatalog
from rrd_connector.domain.entities import MetricDescriptor


def test_catalog_add_and_get():
    """Test adding and looking up metrics."""
    catalog = MetricCatalog()
    descriptor = MetricDescriptor(dataset_name="value", archive_path="/rrd/host1/cpu.rrd")
    catalog.add("host1", "cpu/value", descriptor)

    assert catalog.get("host1", "cpu/value") == descriptor
    assert catalog.get("host1", "cpu/other") is None
    assert catalog.get("host2", "cpu/value") is None
    assert catalog.sources() == ["host1"]
    assert catalog.metrics("host1") == ["cpu/value"]
    assert catalog.metrics("host2") == []


def test_catalog_len_and_iter():
    """Test catalog counts entries across sources."""
    catalog = MetricCatalog()
    catalog.add("host1", "cpu/user", MetricDescriptor("user", "/rrd/host1/cpu.rrd"))
    catalog.add("host1", "cpu/system", MetricDescriptor("system", "/rrd/host1/cpu.rrd"))
    catalog.add("host2", "load/shortterm", MetricDescriptor("shortterm", "/rrd/host2/load.rrd"))

    assert len(catalog) == 3
    assert {(source, metric) for source, metric, _ in catalog} == {
        ("host1", "cpu/user"),
        ("host1", "cpu/system"),
        ("host2", "load/shortterm"),
    }


def test_catalog_store_replace():
    """Test store swaps catalogs wholesale."""
    store = CatalogStore()
    assert len(store.current) == 0

    first = MetricCatalog()
    first.add("host1", "cpu/value", MetricDescriptor("value", "/rrd/host1/cpu.rrd"))
    store.replace(first)
    assert store.current is first

    second = MetricCatalog()
    store.replace(second)
    assert store.current is second
    assert store.current.get("host1", "cpu/value") is None
