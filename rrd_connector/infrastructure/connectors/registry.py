"""Connector registry: connector type name -> factory."""

from functools import partial
from typing import Any, Callable

from rrd_connector.domain.errors import ConfigurationError
from rrd_connector.domain.types import ConnectorConfigMap
from rrd_connector.infrastructure.config.settings import Settings
from rrd_connector.infrastructure.connectors.rrd import create_rrd_connector

ConnectorFactory = Callable[[ConnectorConfigMap], Any]


class ConnectorRegistry:
    """Registry of connector factories, owned by the startup routine."""

    def __init__(self) -> None:
        """Initialize empty registry."""
        self._factories: dict[str, ConnectorFactory] = {}

    def register(self, name: str, factory: ConnectorFactory) -> None:
        """Register a connector factory."""
        if name in self._factories:
            raise ValueError(f"Connector type already registered: {name}")
        self._factories[name] = factory

    def create(self, name: str, config: ConnectorConfigMap) -> Any:
        """Create a connector of the given type."""
        factory = self._factories.get(name)
        if factory is None:
            raise ConfigurationError(f"unknown connector type `{name}'")
        return factory(config)

    def names(self) -> list[str]:
        """Get registered connector type names."""
        return sorted(self._factories)


def build_default_registry(settings: Settings | None = None) -> ConnectorRegistry:
    """Build registry with the built-in connectors."""
    registry = ConnectorRegistry()

    if settings is not None:
        registry.register(
            "rrd",
            partial(create_rrd_connector, discovery_queue_size=settings.discovery_queue_size),
        )
    else:
        registry.register("rrd", create_rrd_connector)

    return registry
