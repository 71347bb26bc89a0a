"""
Configuration module for otlpfile.

This module handles all configuration for the OTLP file exporters,
supporting both environment variables and programmatic configuration.

Configuration Priority (highest to lowest):
    1. Programmatic configuration via configure()
    2. Environment variables
    3. Default values

Environment Variables:
    OTLP_FILE_PATH: Output file path; unset, "-" or "stdout" writes to the console
    OTLP_FILE_APPEND: Append to an existing file instead of truncating (default: true)
    OTLP_FILE_BATCH: Use batching processors when wiring providers (default: false)
    OTLP_FILE_METRICS_TEMPORALITY: "cumulative" or "delta" (default: cumulative)
    OTLP_FILE_METRIC_EXPORT_INTERVAL_MS: Metric reader interval in ms (default: 60000)
    OTLP_FILE_LOG_LEVEL: Logging verbosity of the "otlpfile" logger (default: WARNING)
"""

from __future__ import annotations

import os
import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

from .exceptions import ConfigurationError

__all__ = [
    "LogLevel",
    "Temporality",
    "ExporterConfig",
    "get_config",
    "configure",
    "reset_config",
]

_CONSOLE_PATHS = frozenset({"", "-", "stdout"})


class LogLevel(str, Enum):
    """Log level enum matching Python logging levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class Temporality(str, Enum):
    """Preferred aggregation temporality for exported metrics."""
    CUMULATIVE = "cumulative"
    DELTA = "delta"


def _get_bool_env(key: str, default: bool) -> bool:
    """Parse boolean from environment variable."""
    value = os.getenv(key)
    if value is None:
        return default
    return value.lower() in ('true', '1', 'yes', 'on')


def _get_int_env(key: str, default: int) -> int:
    """Parse int from environment variable."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


@dataclass
class ExporterConfig:
    """
    Configuration for the OTLP file exporters.

    Attributes:
        output_path: File to write JSON lines to. None writes to stdout.
        append: Append to an existing file instead of truncating it.
        batch: Wire exporters behind batching processors instead of simple ones.
        metrics_temporality: Preferred temporality for counters and histograms.
        metric_export_interval_ms: Interval of the periodic metric reader.
        log_level: Level of the "otlpfile" logger.

    Examples:
        !!! example "Configure via environment"
            ```bash
            export OTLP_FILE_PATH="/var/log/otel/telemetry.jsonl"
            export OTLP_FILE_METRICS_TEMPORALITY="delta"
            ```

        !!! example "Configure programmatically"
            ```python
            from otlpfile import configure

            configure(output_path="telemetry.jsonl", batch=True)
            ```
    """

    output_path: str | None = None
    append: bool = True
    batch: bool = False
    metrics_temporality: str = Temporality.CUMULATIVE.value
    metric_export_interval_ms: int = 60000
    log_level: str = LogLevel.WARNING.value

    @property
    def writes_to_console(self) -> bool:
        """True when output goes to stdout rather than a file."""
        return self.output_path is None or self.output_path.strip().lower() in _CONSOLE_PATHS

    @classmethod
    def from_env(cls) -> ExporterConfig:
        """Create configuration from environment variables."""
        return cls(
            output_path=os.getenv("OTLP_FILE_PATH") or None,
            append=_get_bool_env("OTLP_FILE_APPEND", True),
            batch=_get_bool_env("OTLP_FILE_BATCH", False),
            metrics_temporality=os.getenv(
                "OTLP_FILE_METRICS_TEMPORALITY", Temporality.CUMULATIVE.value
            ).lower(),
            metric_export_interval_ms=_get_int_env("OTLP_FILE_METRIC_EXPORT_INTERVAL_MS", 60000),
            log_level=os.getenv("OTLP_FILE_LOG_LEVEL", LogLevel.WARNING.value).upper(),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ConfigurationError: If any configuration value is invalid
        """
        temporalities = {t.value for t in Temporality}
        if self.metrics_temporality not in temporalities:
            raise ConfigurationError(
                f"metrics_temporality must be one of {sorted(temporalities)}, "
                f"got {self.metrics_temporality!r}"
            )

        if self.metric_export_interval_ms < 1:
            raise ConfigurationError(
                f"metric_export_interval_ms must be at least 1, got {self.metric_export_interval_ms}"
            )

        if self.log_level not in LogLevel.__members__:
            raise ConfigurationError(f"log_level must be a logging level name, got {self.log_level!r}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging/debugging."""
        return {
            'output_path': self.output_path,
            'append': self.append,
            'batch': self.batch,
            'metrics_temporality': self.metrics_temporality,
            'metric_export_interval_ms': self.metric_export_interval_ms,
            'log_level': self.log_level,
        }


# Global configuration instance
_config: ExporterConfig | None = None


def get_config() -> ExporterConfig:
    """
    Get the current configuration.

    If not explicitly configured, loads from environment variables.

    Returns:
        Current ExporterConfig instance
    """
    global _config
    if _config is None:
        _config = ExporterConfig.from_env()
    return _config


def configure(
    *,
    output_path: str | None = None,
    append: bool | None = None,
    batch: bool | None = None,
    metrics_temporality: str | None = None,
    metric_export_interval_ms: int | None = None,
    log_level: str | None = None,
) -> ExporterConfig:
    """
    Configure otlpfile programmatically.

    Call this before creating exporters; exporters read the configuration
    once, at construction time.

    Args:
        output_path: Output file path ("-" for stdout)
        append: Append to an existing file
        batch: Use batching processors in the provider helpers
        metrics_temporality: "cumulative" or "delta"
        metric_export_interval_ms: Periodic metric reader interval
        log_level: Logging level name

    Returns:
        The updated ExporterConfig instance

    Example:
        >>> from otlpfile import configure
        >>> configure(output_path="telemetry.jsonl", metrics_temporality="delta")
    """
    global _config

    # Start from a copy of the current config (or env defaults)
    config = replace(get_config())

    if output_path is not None:
        config.output_path = output_path
    if append is not None:
        config.append = append
    if batch is not None:
        config.batch = batch
    if metrics_temporality is not None:
        config.metrics_temporality = metrics_temporality.lower()
    if metric_export_interval_ms is not None:
        config.metric_export_interval_ms = metric_export_interval_ms
    if log_level is not None:
        config.log_level = log_level.upper()

    config.validate()

    logging.getLogger("otlpfile").setLevel(getattr(logging, config.log_level))

    _config = config
    return config


def reset_config() -> None:
    """
    Reset configuration to defaults.

    Primarily for testing purposes.
    """
    global _config
    _config = None
