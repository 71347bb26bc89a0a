"""
Exceptions for otlpfile.
"""

__all__ = [
    "OtlpFileError",
    "SinkClosedError",
    "ConfigurationError",
]


class OtlpFileError(Exception):
    """Base class for otlpfile errors."""
    pass


class SinkClosedError(OtlpFileError, OSError):
    """Raised when writing to an output sink that has been closed."""
    pass


class ConfigurationError(OtlpFileError, ValueError):
    """Raised when an exporter configuration value is invalid."""
    pass
