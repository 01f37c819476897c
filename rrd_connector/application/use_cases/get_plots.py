"""Get plots - compile, execute and merge one group query."""

import time

import structlog

from rrd_connector.application.services.catalog import MetricCatalog
from rrd_connector.application.services.query_compiler import compile_query
from rrd_connector.application.services.result_merger import merge_results
from rrd_connector.application.use_cases.execute_query import run as execute_query
from rrd_connector.domain.entities import GroupQuery, PlotResult
from rrd_connector.domain.errors import (
    EmptyQueryError,
    EngineError,
    QueryError,
    UnknownAggregationTypeError,
    UnknownMetricError,
)
from rrd_connector.domain.ports import TimeSeriesEnginePort
from rrd_connector.domain.types import Step, Timestamp
from rrd_connector.infrastructure.observability.metrics import (
    queries_failed,
    queries_total,
    query_duration_seconds,
)

logger = structlog.get_logger()


async def run(
    query: GroupQuery,
    catalog: MetricCatalog,
    engine: TimeSeriesEnginePort,
    start: Timestamp,
    end: Timestamp,
    step: Step,
    percentiles: list[float] | None = None,
    info_only: bool = False,
) -> dict[str, PlotResult]:
    """Get plot results for a group query over a time window."""
    queries_total.inc()
    started = time.perf_counter()

    try:
        compiled = compile_query(query, catalog, percentiles)
        raw = await execute_query(compiled, engine, start, end, step, info_only)
        result = merge_results(raw.table, raw.stat_lines, compiled.series_labels)
        raw.release()

    except (QueryError, EngineError) as e:
        error_code = _classify_error(e)
        queries_failed.labels(error_code=error_code).inc()
        logger.error(
            "query_failed",
            group=query.name,
            error_code=error_code,
            error_message=str(e),
        )
        raise

    finally:
        query_duration_seconds.observe(time.perf_counter() - started)

    logger.info(
        "query_completed",
        group=query.name,
        aggregation_type=compiled.aggregation_type.value,
        labels=len(result),
        info_only=info_only,
    )

    return result


def _classify_error(error: Exception) -> str:
    """Classify error and return error code."""
    if isinstance(error, EmptyQueryError):
        return "EMPTY_QUERY"
    if isinstance(error, UnknownAggregationTypeError):
        return "UNKNOWN_AGGREGATION_TYPE"
    if isinstance(error, UnknownMetricError):
        return "UNKNOWN_METRIC"
    if isinstance(error, EngineError):
        return "ENGINE_ERROR"
    return "QUERY_ERROR"
