"""Domain entities."""

from dataclasses import dataclass, field

from rrd_connector.domain.enums import AggregationType
from rrd_connector.domain.types import PlotValue


@dataclass(frozen=True)
class MetricDescriptor:
    """Location of a metric dataset inside an archive file."""

    dataset_name: str
    archive_path: str


@dataclass(frozen=True)
class SeriesRef:
    """Reference to a metric series inside a group query.

    A ``metric_name`` of ``None`` marks an unresolved reference, skipped at
    compilation. A ``scale`` of 0 disables scaling.
    """

    name: str
    metric_source: str
    metric_name: str | None
    scale: float = 0.0


@dataclass
class GroupQuery:
    """Named set of series with optional aggregation and scaling."""

    name: str
    series: list[SeriesRef]
    aggregation_type: AggregationType | str = AggregationType.NONE
    scale: float = 0.0


@dataclass
class PlotResult:
    """Samples and summary statistics for one series or group label."""

    samples: list[PlotValue] = field(default_factory=list)
    statistics: dict[str, PlotValue] = field(default_factory=dict)


@dataclass(frozen=True)
class DiscoveredMetric:
    """Source/metric pair found while walking the archive tree."""

    source: str
    metric: str


@dataclass(frozen=True)
class DiscoveryEvent:
    """Discovery stream item: either a discovered metric or a terminal error."""

    metric: DiscoveredMetric | None = None
    error: Exception | None = None

    @property
    def is_error(self) -> bool:
        """Whether this event terminates the stream with an error."""
        return self.error is not None


@dataclass(frozen=True)
class WalkEntry:
    """File tree walker entry."""

    path: str
    is_regular_file: bool
