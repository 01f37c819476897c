"""Domain enums for group aggregation and statistics."""

from enum import Enum


class AggregationType(str, Enum):
    """Group aggregation type enum."""

    NONE = "none"
    SUM = "sum"
    AVG = "avg"


class ConsolidationFunction(str, Enum):
    """Archive consolidation function enum."""

    AVERAGE = "AVERAGE"
    MIN = "MIN"
    MAX = "MAX"
    LAST = "LAST"


class StatisticKind(str, Enum):
    """Summary statistic kind, keyed by its label suffix."""

    MIN = "min"
    AVG = "avg"
    MAX = "max"
    LAST = "last"

    @property
    def reduction(self) -> str:
        """RPN reduction operator for this statistic."""
        return _REDUCTIONS[self]


_REDUCTIONS = {
    StatisticKind.MIN: "MINIMUM",
    StatisticKind.AVG: "AVERAGE",
    StatisticKind.MAX: "MAXIMUM",
    StatisticKind.LAST: "LAST",
}
