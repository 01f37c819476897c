"""Group query compiler.

Turns a group query into two engine programs sharing the same series
definitions:

- the export program, whose XPORT columns carry the per-step samples;
- the graph program, whose PRINT lines carry min/avg/max/last and the
  requested percentiles as ``label,key,value``.
"""

from dataclasses import dataclass, field

import structlog

from rrd_connector.application.services.catalog import MetricCatalog
from rrd_connector.domain.entities import GroupQuery, MetricDescriptor, SeriesRef
from rrd_connector.domain.enums import AggregationType, StatisticKind
from rrd_connector.domain.errors import (
    EmptyQueryError,
    UnknownAggregationTypeError,
    UnknownMetricError,
)
from rrd_connector.domain.expressions import (
    BinaryOp,
    Constant,
    Expression,
    PercentileOf,
    Reduction,
    Reference,
    scaled,
    sum_of,
    unknown_as_zero,
)
from rrd_connector.domain.program import Define, Derive, Export, Print, Program, Summarize
from rrd_connector.domain.types import SeriesLabels

logger = structlog.get_logger()


@dataclass
class CompiledQuery:
    """Export and graph programs for one group query."""

    aggregation_type: AggregationType
    export_program: Program = field(default_factory=Program)
    graph_program: Program = field(default_factory=Program)
    series_labels: SeriesLabels = field(default_factory=dict)


class IdentifierAllocator:
    """Allocates ``serie<N>`` identifiers, unique within one compilation."""

    def __init__(self) -> None:
        """Initialize allocator."""
        self._count = 0

    def next(self) -> str:
        """Allocate the next identifier."""
        name = f"serie{self._count}"
        self._count += 1
        return name


def compile_query(
    query: GroupQuery,
    catalog: MetricCatalog,
    percentiles: list[float] | None = None,
) -> CompiledQuery:
    """Compile group query into export and graph programs."""
    if not query.series:
        raise EmptyQueryError(f"Group {query.name!r} has no series")

    try:
        aggregation_type = AggregationType(query.aggregation_type)
    except ValueError:
        raise UnknownAggregationTypeError(
            f"Unknown aggregation type: {query.aggregation_type}"
        ) from None

    resolved = _resolve_series(query.series, catalog)
    aggregation_type = effective_aggregation(aggregation_type, len(resolved))

    compiled = CompiledQuery(aggregation_type=aggregation_type)
    allocator = IdentifierAllocator()
    percentiles = percentiles or []

    if aggregation_type == AggregationType.NONE:
        _compile_plain(query, resolved, allocator, percentiles, compiled)
    else:
        _compile_aggregate(query, resolved, allocator, percentiles, compiled)

    logger.debug(
        "query_compiled",
        group=query.name,
        aggregation_type=aggregation_type.value,
        series_count=len(query.series),
        resolved_count=len(resolved),
    )

    return compiled


def effective_aggregation(aggregation_type: AggregationType, resolved_count: int) -> AggregationType:
    """Aggregation actually applied to a group.

    Aggregating fewer than two series is the identity, so the group falls back
    to plain mode: outputs are then labelled with the series name rather than
    the group name, and the group scale applies per series.
    """
    if aggregation_type != AggregationType.NONE and resolved_count < 2:
        return AggregationType.NONE
    return aggregation_type


def percentile_key(percentile: float) -> str:
    """Statistic key for a percentile: ``95th``, ``99.90th``."""
    if percentile - int(percentile) != 0:
        return f"{percentile:.2f}th"
    return f"{percentile:.0f}th"


def _resolve_series(
    series: list[SeriesRef],
    catalog: MetricCatalog,
) -> list[tuple[int, SeriesRef, MetricDescriptor]]:
    """Resolve series to descriptors, keeping their configured index."""
    resolved = []
    for index, serie in enumerate(series):
        if serie.metric_name is None:
            continue

        descriptor = catalog.get(serie.metric_source, serie.metric_name)
        if descriptor is None:
            raise UnknownMetricError(
                f"Unknown metric {serie.metric_name!r} for source {serie.metric_source!r}"
            )

        resolved.append((index, serie, descriptor))

    return resolved


def _compile_plain(
    query: GroupQuery,
    resolved: list[tuple[int, SeriesRef, MetricDescriptor]],
    allocator: IdentifierAllocator,
    percentiles: list[float],
    compiled: CompiledQuery,
) -> None:
    for _, serie, descriptor in resolved:
        name = allocator.next()

        definitions = [
            Define(f"{name}-orig0", descriptor.archive_path, descriptor.dataset_name),
            Derive(f"{name}-orig1", scaled(Reference(f"{name}-orig0"), serie.scale)),
            Derive(name, scaled(Reference(f"{name}-orig1"), query.scale)),
        ]

        _add_definitions(compiled, definitions, name)
        _add_statistics(compiled.graph_program, name, serie.name, percentiles)

        compiled.series_labels[name] = serie.name


def _compile_aggregate(
    query: GroupQuery,
    resolved: list[tuple[int, SeriesRef, MetricDescriptor]],
    allocator: IdentifierAllocator,
    percentiles: list[float],
    compiled: CompiledQuery,
) -> None:
    name = allocator.next()
    definitions = []
    operands: list[Expression] = []

    for index, _, descriptor in resolved:
        temp = f"{name}-tmp{index}"
        definitions.append(Define(f"{temp}-ori", descriptor.archive_path, descriptor.dataset_name))
        definitions.append(Derive(temp, unknown_as_zero(Reference(f"{temp}-ori"))))
        operands.append(Reference(temp))

    combined = sum_of(operands)
    if compiled.aggregation_type == AggregationType.AVG:
        combined = BinaryOp("/", combined, Constant(len(resolved)))

    definitions.append(Derive(f"{name}-orig", combined))
    definitions.append(Derive(name, scaled(Reference(f"{name}-orig"), query.scale)))

    _add_definitions(compiled, definitions, name)
    _add_statistics(compiled.graph_program, name, query.name, percentiles)

    compiled.series_labels[name] = query.name


def _add_definitions(compiled: CompiledQuery, definitions: list, name: str) -> None:
    """Add definitions to both programs and export the final identifier."""
    for definition in definitions:
        compiled.graph_program.add(definition)
        compiled.export_program.add(definition)

    compiled.export_program.add(Export(name, name))


def _add_statistics(program: Program, name: str, label: str, percentiles: list[float]) -> None:
    """Add summary and percentile statistics for one identifier."""
    reference = Reference(name)

    for kind in StatisticKind:
        program.add(Summarize(f"{name}-{kind.value}", Reduction(reference, kind)))
        program.add(Print(f"{name}-{kind.value}", label, kind.value))

    for index, percentile in enumerate(percentiles):
        cdef = f"{name}-cdef{index}"
        vdef = f"{name}-vdef{index}"
        program.add(Derive(cdef, unknown_as_zero(reference)))
        program.add(Summarize(vdef, PercentileOf(Reference(cdef), percentile)))
        program.add(Print(vdef, label, percentile_key(percentile)))
