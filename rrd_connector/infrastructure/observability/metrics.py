"""Prometheus metrics."""

from prometheus_client import Counter, Histogram

queries_total = Counter(
    "rrd_queries_total",
    "Total number of group queries received",
)

queries_failed = Counter(
    "rrd_queries_failed_total",
    "Total number of group queries failed",
    ["error_code"],
)

query_duration_seconds = Histogram(
    "rrd_query_duration_seconds",
    "Duration of group queries in seconds",
    buckets=[0.01, 0.05, 0.1, 0.5, 1, 5, 10, 30],
)

discovered_metrics = Counter(
    "rrd_discovered_metrics_total",
    "Total number of source/metric pairs discovered",
)

discovery_skipped_files = Counter(
    "rrd_discovery_skipped_files_total",
    "Total number of archive files skipped during discovery",
    ["reason"],
)

refreshes_failed = Counter(
    "rrd_refreshes_failed_total",
    "Total number of catalog refreshes aborted",
)
