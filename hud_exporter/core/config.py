"""
Configuration management for the HUD metrics exporter.

Loads configuration from YAML files and environment variables.
"""

import logging
import logging.handlers
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml


logger = logging.getLogger(__name__)

DEFAULT_UPDATE_INTERVAL_MS = 1000


@dataclass
class ExporterConfig:
    """Metrics exporter configuration."""

    enabled: bool = False
    bind_address: str = "16969"  # host:port or bare port
    start_delay_seconds: float = 0
    update_interval_ms: int = DEFAULT_UPDATE_INTERVAL_MS

    def __post_init__(self):
        if self.update_interval_ms <= 0:
            logger.warning(
                f"Invalid metrics update interval {self.update_interval_ms}ms. "
                f"Using default {DEFAULT_UPDATE_INTERVAL_MS}ms"
            )
            self.update_interval_ms = DEFAULT_UPDATE_INTERVAL_MS
        if self.start_delay_seconds < 0:
            self.start_delay_seconds = 0

    @property
    def update_interval_seconds(self) -> float:
        """Sampling interval in seconds."""
        return self.update_interval_ms / 1000.0


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file_path: Optional[str] = None
    max_file_size_mb: int = 10
    backup_count: int = 5


@dataclass
class Config:
    """Main configuration container."""

    exporter: ExporterConfig = field(default_factory=ExporterConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, path: str) -> "Config":
        """Load configuration from YAML file."""
        config_path = Path(path)
        if not config_path.exists():
            config = cls()
            config._apply_env_overrides()
            return config

        with open(config_path, "r") as f:
            data = yaml.safe_load(f) or {}

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict) -> "Config":
        """Create config from dictionary."""
        config = cls()

        if "exporter" in data:
            config.exporter = ExporterConfig(**data["exporter"])

        if "logging" in data:
            config.logging = LoggingConfig(**data["logging"])

        # Override with environment variables
        config._apply_env_overrides()

        return config

    def _apply_env_overrides(self):
        """Apply environment variable overrides."""
        if os.getenv("HUD_EXPORTER_ENABLED"):
            self.exporter.enabled = os.getenv("HUD_EXPORTER_ENABLED").lower() in ("1", "true", "yes")
        if os.getenv("HUD_EXPORTER_BIND"):
            self.exporter.bind_address = os.getenv("HUD_EXPORTER_BIND")
        if os.getenv("HUD_EXPORTER_START_DELAY"):
            self.exporter.start_delay_seconds = max(0.0, float(os.getenv("HUD_EXPORTER_START_DELAY")))
        if os.getenv("HUD_EXPORTER_UPDATE_INTERVAL_MS"):
            interval = int(os.getenv("HUD_EXPORTER_UPDATE_INTERVAL_MS"))
            if interval > 0:
                self.exporter.update_interval_ms = interval
            else:
                logger.warning(f"Ignoring invalid HUD_EXPORTER_UPDATE_INTERVAL_MS={interval}")

        # Logging
        if os.getenv("LOG_LEVEL"):
            self.logging.level = os.getenv("LOG_LEVEL")

    def to_yaml(self, path: str):
        """Save configuration to YAML file."""
        data = {
            "exporter": {
                "enabled": self.exporter.enabled,
                "bind_address": self.exporter.bind_address,
                "start_delay_seconds": self.exporter.start_delay_seconds,
                "update_interval_ms": self.exporter.update_interval_ms,
            },
            "logging": {
                "level": self.logging.level,
                "file_path": self.logging.file_path,
            },
        }

        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False)


def get_default_config_path() -> str:
    """Get the default configuration file path."""
    # Check common locations
    candidates = [
        Path("config/hud_exporter.yaml"),
        Path("hud_exporter.yaml"),
        Path.home() / ".config" / "hud-exporter" / "config.yaml",
        Path("/etc/hud-exporter/config.yaml"),
    ]

    for path in candidates:
        if path.exists():
            return str(path)

    # Return the first candidate as default
    return str(candidates[0])


def configure_logging(config: LoggingConfig):
    """Apply logging configuration to the root logger."""
    root = logging.getLogger()
    root.setLevel(config.level.upper())

    formatter = logging.Formatter(config.format)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(formatter)
        root.addHandler(handler)

    if config.file_path:
        Path(config.file_path).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            config.file_path,
            maxBytes=config.max_file_size_mb * 1024 * 1024,
            backupCount=config.backup_count,
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
