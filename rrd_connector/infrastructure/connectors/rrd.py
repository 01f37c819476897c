"""RRD connector: catalog refresh and group queries."""

from collections.abc import AsyncIterator
from contextlib import aclosing

import structlog

from rrd_connector.application.dto.config import RRDConnectorConfig
from rrd_connector.application.services.catalog import CatalogStore
from rrd_connector.application.use_cases.discover_metrics import MetricDiscovery
from rrd_connector.application.use_cases.get_plots import run as get_plots
from rrd_connector.domain.entities import DiscoveryEvent, GroupQuery, PlotResult
from rrd_connector.domain.ports import FileTreeWalkerPort, TimeSeriesEnginePort
from rrd_connector.domain.types import ConnectorConfigMap, Step, Timestamp
from rrd_connector.infrastructure.filesystem.walker import OsFileTreeWalker
from rrd_connector.infrastructure.observability.metrics import refreshes_failed

logger = structlog.get_logger()


class RRDConnector:
    """Metric source backed by a tree of RRD archives."""

    def __init__(
        self,
        config: RRDConnectorConfig,
        engine: TimeSeriesEnginePort,
        walker: FileTreeWalkerPort,
        discovery_queue_size: int = 100,
    ) -> None:
        """Initialize connector."""
        self.config = config
        self.engine = engine
        self.walker = walker
        self.discovery_queue_size = discovery_queue_size
        self.catalog_store = CatalogStore()

    async def get_plots(
        self,
        query: GroupQuery,
        start: Timestamp,
        end: Timestamp,
        step: Step,
        percentiles: list[float] | None = None,
    ) -> dict[str, PlotResult]:
        """Get samples and statistics for a group query."""
        return await get_plots(
            query,
            self.catalog_store.current,
            self.engine,
            start,
            end,
            step,
            percentiles,
        )

    async def get_plot_info(
        self,
        query: GroupQuery,
        start: Timestamp,
        end: Timestamp,
        step: Step,
        percentiles: list[float] | None = None,
    ) -> dict[str, PlotResult]:
        """Get statistics only for a group query, without samples."""
        return await get_plots(
            query,
            self.catalog_store.current,
            self.engine,
            start,
            end,
            step,
            percentiles,
            info_only=True,
        )

    async def refresh(self) -> AsyncIterator[DiscoveryEvent]:
        """Rebuild the catalog, yielding discovery events as they come.

        The new catalog replaces the current one only if the walk completes.
        """
        logger.info("refresh_started", path=self.config.path)

        discovery = MetricDiscovery(
            self.config.path,
            self.config.pattern,
            self.walker,
            self.engine,
            queue_size=self.discovery_queue_size,
        )

        async with aclosing(discovery.stream()) as events:
            async for event in events:
                yield event

        if not discovery.completed:
            refreshes_failed.inc()
            logger.warning("refresh_aborted", path=self.config.path)
            return

        self.catalog_store.replace(discovery.catalog)
        logger.info("refresh_completed", path=self.config.path, metric_count=len(discovery.catalog))


def create_rrd_connector(config: ConnectorConfigMap, discovery_queue_size: int = 100) -> RRDConnector:
    """Build an RRD connector from a connector settings map."""
    connector_config = RRDConnectorConfig.from_map(config)

    from rrd_connector.infrastructure.engine.rrd_engine import RRDToolEngine

    return RRDConnector(
        connector_config,
        RRDToolEngine(daemon=connector_config.daemon),
        OsFileTreeWalker(),
        discovery_queue_size=discovery_queue_size,
    )
