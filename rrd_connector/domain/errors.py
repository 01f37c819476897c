"""Domain errors."""


class DomainError(Exception):
    """Base domain error."""


class ConfigurationError(DomainError):
    """Invalid or missing connector setting."""


class DiscoveryError(DomainError):
    """Archive tree walk failed."""


class QueryError(DomainError):
    """Group query cannot be compiled."""


class EmptyQueryError(QueryError):
    """Group query has no series."""


class UnknownAggregationTypeError(QueryError):
    """Group aggregation type is not supported."""


class UnknownMetricError(QueryError):
    """Series references a metric missing from the catalog."""


class EngineError(DomainError):
    """Time-series engine execution failed."""
