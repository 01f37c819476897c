"""Connector configuration DTOs."""

from pydantic import BaseModel, ConfigDict, StrictStr, ValidationError

from rrd_connector.domain.errors import ConfigurationError
from rrd_connector.domain.types import ConnectorConfigMap

MANDATORY_SETTINGS = ("path", "pattern")


class RRDConnectorConfig(BaseModel):
    """RRD connector settings."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    path: StrictStr
    pattern: StrictStr
    daemon: StrictStr | None = None

    @classmethod
    def from_map(cls, config: ConnectorConfigMap) -> "RRDConnectorConfig":
        """Validate a free-form connector settings map."""
        for key in MANDATORY_SETTINGS:
            if key not in config:
                raise ConfigurationError(f"missing `{key}' mandatory connector setting")

        try:
            return cls.model_validate(config)
        except ValidationError as e:
            key = e.errors()[0]["loc"][0]
            raise ConfigurationError(f"connector setting `{key}' should be a string") from e
