"""
Configuration management for the usage-control pattern service.

Handles loading, validation, and access to service configuration.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml


# Default configuration paths
DEFAULT_CONFIG_PATH = Path("/etc/usage-patterns/patterns.yaml")

LOG_LEVEL_ENV = "USAGE_PATTERNS_LOG_LEVEL"


@dataclass
class LoggingConfig:
    """Logging settings."""

    level: str | None = None
    file: str | None = None

    def __post_init__(self) -> None:
        # Load level from environment if not set
        if self.level is None:
            self.level = os.environ.get(LOG_LEVEL_ENV, "info")


@dataclass
class APIConfig:
    """API server settings."""

    host: str = "127.0.0.1"
    port: int = 8080
    cors_enabled: bool = True
    cors_origins: list[str] = field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"]
    )


@dataclass
class OutputConfig:
    """Serialized document settings."""

    indent: int | None = 2


@dataclass
class PatternsConfig:
    """Main configuration container."""

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    api: APIConfig = field(default_factory=APIConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PatternsConfig:
        """Create configuration from dictionary."""
        return cls(
            logging=LoggingConfig(**data.get("logging", {})),
            api=APIConfig(**data.get("api", {})),
            output=OutputConfig(**data.get("output", {})),
        )


def load_config(path: str | Path | None = None) -> PatternsConfig:
    """
    Load configuration from YAML file.

    Args:
        path: Path to configuration file. If None, uses default paths.

    Returns:
        PatternsConfig instance with loaded settings.

    Raises:
        FileNotFoundError: If an explicit config file is not found.
        yaml.YAMLError: If config file is invalid YAML.
    """
    if path is None:
        candidates = [
            DEFAULT_CONFIG_PATH,
            Path("config/patterns.yaml"),
            Path("patterns.yaml"),
        ]
        for candidate in candidates:
            if candidate.exists():
                path = candidate
                break

    if path is None:
        return PatternsConfig()

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    return PatternsConfig.from_dict(data)


def validate_config(config: PatternsConfig) -> list[str]:
    """
    Validate configuration and return list of errors.

    Args:
        config: Configuration to validate.

    Returns:
        List of error messages. Empty list if valid.
    """
    errors: list[str] = []

    valid_log_levels = {"debug", "info", "warning", "error"}
    if config.logging.level not in valid_log_levels:
        errors.append(f"Invalid log level: {config.logging.level}")

    if not (1 <= config.api.port <= 65535):
        errors.append(f"Invalid API port: {config.api.port}")

    if config.output.indent is not None and config.output.indent < 0:
        errors.append(f"Invalid output indent: {config.output.indent}")

    return errors
