"""Metric catalog: source -> metric -> archive dataset."""

from collections.abc import Iterator

from rrd_connector.domain.entities import MetricDescriptor


class MetricCatalog:
    """Index of discovered metrics.

    Filled by a single discovery run, then only read. A new discovery run
    builds a new catalog instead of updating this one.
    """

    def __init__(self) -> None:
        """Initialize empty catalog."""
        self._metrics: dict[str, dict[str, MetricDescriptor]] = {}

    def add(self, source: str, metric: str, descriptor: MetricDescriptor) -> None:
        """Add or overwrite a metric entry."""
        self._metrics.setdefault(source, {})[metric] = descriptor

    def get(self, source: str, metric: str) -> MetricDescriptor | None:
        """Get metric descriptor, or None when unknown."""
        return self._metrics.get(source, {}).get(metric)

    def sources(self) -> list[str]:
        """Get known source names."""
        return list(self._metrics)

    def metrics(self, source: str) -> list[str]:
        """Get metric names for a source."""
        return list(self._metrics.get(source, {}))

    def __iter__(self) -> Iterator[tuple[str, str, MetricDescriptor]]:
        for source, metrics in self._metrics.items():
            for metric, descriptor in metrics.items():
                yield source, metric, descriptor

    def __len__(self) -> int:
        return sum(len(metrics) for metrics in self._metrics.values())


class CatalogStore:
    """Holder for the current catalog, replaced wholesale after discovery."""

    def __init__(self, catalog: MetricCatalog | None = None) -> None:
        """Initialize store."""
        self._catalog = catalog if catalog is not None else MetricCatalog()

    @property
    def current(self) -> MetricCatalog:
        """Get current catalog."""
        return self._catalog

    def replace(self, catalog: MetricCatalog) -> None:
        """Swap in a fully built catalog."""
        self._catalog = catalog
