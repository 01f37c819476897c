"""Discover metrics by walking the archive tree."""

import asyncio
import os
import re
from collections.abc import AsyncIterator

import structlog

from rrd_connector.application.services.catalog import MetricCatalog
from rrd_connector.domain.entities import DiscoveredMetric, DiscoveryEvent, MetricDescriptor
from rrd_connector.domain.errors import ConfigurationError, DiscoveryError, EngineError
from rrd_connector.domain.ports import FileTreeWalkerPort, TimeSeriesEnginePort
from rrd_connector.infrastructure.observability.metrics import (
    discovered_metrics,
    discovery_skipped_files,
)

logger = structlog.get_logger()

PATTERN_KEYWORDS = ("source", "metric")

_END_OF_STREAM = object()


def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Compile identity pattern, requiring exactly the source and metric groups."""
    try:
        regex = re.compile(pattern)
    except re.error as e:
        raise ConfigurationError(f"invalid pattern `{pattern}': {e}") from e

    for key in regex.groupindex:
        if key not in PATTERN_KEYWORDS:
            raise ConfigurationError(f"invalid pattern keyword `{key}'")

    for key in PATTERN_KEYWORDS:
        if key not in regex.groupindex:
            raise ConfigurationError(f"missing pattern keyword `{key}'")

    return regex


class MetricDiscovery:
    """One discovery run over an archive tree.

    ``stream()`` yields a DiscoveryEvent per discovered dataset while the tree
    is still being walked. A fatal error arrives as the last event. Once the
    stream is exhausted, ``completed`` tells whether ``catalog`` is complete.
    """

    def __init__(
        self,
        root: str,
        pattern: str,
        walker: FileTreeWalkerPort,
        engine: TimeSeriesEnginePort,
        queue_size: int = 100,
    ) -> None:
        """Initialize discovery run."""
        self.root = root
        self.pattern = pattern
        self.walker = walker
        self.engine = engine
        self.queue_size = queue_size
        self.catalog = MetricCatalog()
        self.completed = False

    async def stream(self) -> AsyncIterator[DiscoveryEvent]:
        """Run discovery and yield events until the end of the walk."""
        queue: asyncio.Queue = asyncio.Queue(maxsize=self.queue_size)
        producer = asyncio.create_task(self._produce(queue))

        try:
            while True:
                item = await queue.get()
                if item is _END_OF_STREAM:
                    break
                yield item
        finally:
            if not producer.done():
                producer.cancel()
            await asyncio.gather(producer, return_exceptions=True)

    async def _produce(self, queue: asyncio.Queue) -> None:
        """Walk the tree and feed the queue, then mark the end of stream."""
        try:
            regex = compile_pattern(self.pattern)

            # Walker steps run in a worker thread
            entries = iter(self.walker.walk(self.root))
            while True:
                entry = await asyncio.to_thread(next, entries, None)
                if entry is None:
                    break
                if not entry.is_regular_file:
                    continue
                await self._visit(entry.path, regex, queue)

        except ConfigurationError as e:
            logger.error("discovery_configuration_error", root=self.root, error=str(e))
            await queue.put(DiscoveryEvent(error=e))
        except OSError as e:
            logger.error("discovery_walk_failed", root=self.root, error=str(e))
            await queue.put(DiscoveryEvent(error=DiscoveryError(f"Failed to walk {self.root}: {e}")))
        except Exception as e:
            logger.error("discovery_failed", root=self.root, exc_info=True, error=str(e))
            await queue.put(DiscoveryEvent(error=e))
        else:
            self.completed = True
            logger.info("discovery_completed", root=self.root, metric_count=len(self.catalog))

        await queue.put(_END_OF_STREAM)

    async def _visit(self, file_path: str, regex: re.Pattern[str], queue: asyncio.Queue) -> None:
        """Index one archive file."""
        match = regex.search(os.path.relpath(file_path, self.root))
        if match is None:
            logger.warning("file_not_matching_pattern", path=file_path)
            discovery_skipped_files.labels(reason="pattern_mismatch").inc()
            return

        source = match.group("source")
        metric = match.group("metric")
        if source is None or metric is None:
            logger.warning("file_missing_pattern_keyword", path=file_path, source=source, metric=metric)
            discovery_skipped_files.labels(reason="pattern_mismatch").inc()
            return

        try:
            dataset_names = await self.engine.dataset_names(file_path)
        except EngineError as e:
            logger.warning("archive_info_failed", path=file_path, error=str(e))
            discovery_skipped_files.labels(reason="archive_info").inc()
            return

        for dataset_name in dataset_names:
            metric_full_name = f"{metric}/{dataset_name}"
            self.catalog.add(
                source,
                metric_full_name,
                MetricDescriptor(dataset_name=dataset_name, archive_path=file_path),
            )
            discovered_metrics.inc()
            await queue.put(DiscoveryEvent(metric=DiscoveredMetric(source, metric_full_name)))
