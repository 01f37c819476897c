"""Merge export columns and printed statistics into plot results."""

import math

import structlog

from rrd_connector.domain.entities import PlotResult
from rrd_connector.domain.types import ExportTable, SeriesLabels, StatLines

logger = structlog.get_logger()


def merge_results(
    table: ExportTable | None,
    stat_lines: StatLines,
    series_labels: SeriesLabels,
) -> dict[str, PlotResult]:
    """Build one PlotResult per series or group label.

    Export columns are keyed by identifier and mapped back to their label.
    Statistic lines are ``label,key,value``; an unparsable value is stored
    as NaN.
    """
    result: dict[str, PlotResult] = {}

    if table is not None:
        for column in table.columns:
            label = series_labels.get(column, column)
            result[label] = PlotResult(samples=[float(value) for value in table[column].tolist()])

    for line in stat_lines:
        # Labels may contain commas, the key and value never do
        chunks = line.rsplit(",", 2)
        if len(chunks) != 3:
            logger.warning("malformed_statistic_line", line=line)
            continue

        label, key, raw_value = chunks
        result.setdefault(label, PlotResult()).statistics[key] = _parse_value(raw_value, label, key)

    return result


def _parse_value(raw_value: str, label: str, key: str) -> float:
    try:
        return float(raw_value)
    except ValueError:
        logger.debug("statistic_parse_failed", label=label, key=key, value=raw_value)
        return math.nan
