"""Prometheus exporter for connector metrics."""

import structlog
from prometheus_client import start_http_server

from rrd_connector.infrastructure.config.settings import Settings

logger = structlog.get_logger()


def start_metrics_server(settings: Settings) -> None:
    """Expose query and discovery metrics on the configured address."""
    start_http_server(settings.prometheus_port, addr=settings.prometheus_addr)
    logger.info("metrics_server_started", addr=settings.prometheus_addr, port=settings.prometheus_port)
