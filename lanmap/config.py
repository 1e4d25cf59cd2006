"""Configuration management for LanMap."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import yaml


DEFAULT_ENDPOINT = "https://fritzi.internal.carlo-hildebrandt.de/api/v1/landevices"


class ConfigError(Exception):
    """Configuration error."""
    pass


@dataclass
class DiscoveryConfig:
    endpoint: str = DEFAULT_ENDPOINT
    timeout: float = 15.0
    verify_ssl: bool = True


@dataclass
class ViewConfig:
    transition_duration: float = 0.75   # seconds
    label_min_thickness: float = 16.0   # layout px
    padding: float = 1.0                # layout px between rectangles
    cell_width_px: int = 8
    cell_height_px: int = 16


@dataclass
class LoggingConfig:
    level: str = "WARNING"
    file: str = ""


@dataclass
class Config:
    discovery: DiscoveryConfig = field(default_factory=DiscoveryConfig)
    view: ViewConfig = field(default_factory=ViewConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    CONFIG_PATHS = [
        Path.home() / ".config" / "lanmap" / "config.yaml",
        Path.home() / ".config" / "lanmap" / "config.yml",
        Path("config") / "config.yaml",
        Path("config") / "config.yml",
    ]

    @classmethod
    def find_config_file(cls) -> Optional[Path]:
        """Find the first existing config file."""
        for path in cls.CONFIG_PATHS:
            if path.exists():
                return path
        return None

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "Config":
        """Load configuration from YAML file.

        Without an explicit path the standard locations are searched; when
        none exists the built-in defaults are used.
        """
        if path is None:
            path = cls.find_config_file()
            if path is None:
                return cls()

        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except Exception as e:
            raise ConfigError(f"Failed to read config file {path}: {e}")

        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> "Config":
        config = cls()

        try:
            # Parse discovery section
            if isinstance(data.get("discovery"), dict):
                disc = data["discovery"]
                config.discovery = DiscoveryConfig(
                    endpoint=str(disc.get("endpoint", DEFAULT_ENDPOINT)).strip(),
                    timeout=float(disc.get("timeout", 15.0)),
                    verify_ssl=bool(disc.get("verify_ssl", True)),
                )

            # Parse view section
            if isinstance(data.get("view"), dict):
                view = data["view"]
                config.view = ViewConfig(
                    transition_duration=float(view.get("transition_duration", 0.75)),
                    label_min_thickness=float(view.get("label_min_thickness", 16.0)),
                    padding=float(view.get("padding", 1.0)),
                    cell_width_px=int(view.get("cell_width_px", 8)),
                    cell_height_px=int(view.get("cell_height_px", 16)),
                )

            # Parse logging section
            if isinstance(data.get("logging"), dict):
                log = data["logging"]
                config.logging = LoggingConfig(
                    level=str(log.get("level", "WARNING")).upper(),
                    file=str(log.get("file", "") or ""),
                )
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid configuration value: {e}")

        config.validate()
        return config

    def validate(self) -> None:
        """Raise ConfigError when a setting cannot work."""
        endpoint = self.discovery.endpoint
        if not endpoint:
            raise ConfigError("Discovery endpoint is required in configuration")
        if not endpoint.startswith(("http://", "https://")):
            raise ConfigError(f"Discovery endpoint must be an http(s) URL: {endpoint}")
        if self.discovery.timeout <= 0:
            raise ConfigError("discovery.timeout must be positive")
        if self.view.transition_duration < 0:
            raise ConfigError("view.transition_duration must not be negative")
        if self.view.padding < 0:
            raise ConfigError("view.padding must not be negative")
        if self.view.cell_width_px <= 0 or self.view.cell_height_px <= 0:
            raise ConfigError("view.cell_width_px and view.cell_height_px must be positive")
        if self.logging.level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ConfigError(f"Unknown logging level: {self.logging.level}")
