"""Main entrypoint."""

import asyncio
import signal

import structlog

from rrd_connector.infrastructure.config.settings import Settings
from rrd_connector.infrastructure.connectors.registry import build_default_registry
from rrd_connector.infrastructure.connectors.rrd import RRDConnector
from rrd_connector.infrastructure.observability.logging import configure_logging
from rrd_connector.infrastructure.runtime.health import start_metrics_server

logger = structlog.get_logger()

shutdown_event = asyncio.Event()


def signal_handler() -> None:
    """Handle shutdown signal."""
    logger.info("shutdown_signal_received")
    shutdown_event.set()


async def refresh_catalog(connector: RRDConnector) -> int:
    """Run one catalog refresh and return the number of discovered metrics."""
    discovered = 0

    async for event in connector.refresh():
        if event.is_error:
            logger.error("refresh_error", error=str(event.error))
            continue

        discovered += 1
        logger.debug("metric_discovered", source=event.metric.source, metric=event.metric.metric)

    return discovered


async def main_loop() -> None:
    """Main event loop."""
    settings = Settings()
    configure_logging(settings.log_level, settings.log_json)

    logger.info(
        "connector_starting",
        path=settings.path,
        pattern=settings.pattern,
        daemon=settings.daemon,
        refresh_interval_seconds=settings.refresh_interval_seconds,
    )

    start_metrics_server(settings)

    registry = build_default_registry(settings)
    connector = registry.create("rrd", settings.connector_config())

    logger.info("connector_ready", connector_types=registry.names())

    while not shutdown_event.is_set():
        try:
            discovered = await refresh_catalog(connector)
            logger.info("catalog_refreshed", discovered=discovered)
        except Exception as e:
            logger.error("main_loop_error", exc_info=True, error=str(e))

        try:
            await asyncio.wait_for(shutdown_event.wait(), timeout=settings.refresh_interval_seconds)
        except asyncio.TimeoutError:
            pass

    logger.info("connector_shutting_down")


def main() -> None:
    """Entrypoint."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)

    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, signal_handler)

    try:
        loop.run_until_complete(main_loop())
    except KeyboardInterrupt:
        pass
    finally:
        loop.close()


if __name__ == "__main__":
    main()
