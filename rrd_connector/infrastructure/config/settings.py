"""Application settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    # Archive root and identity pattern with `source' and `metric' groups
    path: str
    pattern: str
    # rrdcached endpoint, e.g. unix:/var/run/rrdcached.sock
    daemon: str | None = None
    refresh_interval_seconds: int = 300
    discovery_queue_size: int = 100
    log_level: str = "INFO"
    log_json: bool = True
    prometheus_addr: str = "0.0.0.0"
    prometheus_port: int = 9300

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="RRD_",
        extra="ignore",
    )

    def connector_config(self) -> dict[str, str]:
        """Connector settings map for the `rrd' factory."""
        config = {"path": self.path, "pattern": self.pattern}
        if self.daemon:
            config["daemon"] = self.daemon
        return config
