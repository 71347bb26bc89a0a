"""
otlpfile
~~~~~~~~

OTLP JSON file exporters for the OpenTelemetry Python SDK.

Spans, log records and metrics are written as JSON Lines in the OTLP JSON
Protobuf Encoding, the format read by the OpenTelemetry Collector's
``otlpjsonfile`` receiver.
"""

from ._compat import JSON_ENCODER
from .config import ExporterConfig, configure, get_config, reset_config
from .exceptions import ConfigurationError, OtlpFileError, SinkClosedError
from .exporters import OtlpFileLogExporter, OtlpFileMetricExporter, OtlpFileSpanExporter
from .output import BufferOutput, ConsoleOutput, FileOutput, OutputSink, get_output
from .providers import (
    add_otlp_file_log_exporter,
    add_otlp_file_span_exporter,
    create_otlp_file_metric_reader,
)

__version__ = "0.1.0"
__all__ = [
    # Configuration
    "configure", "get_config", "reset_config", "ExporterConfig",

    # Exporters
    "OtlpFileSpanExporter", "OtlpFileLogExporter", "OtlpFileMetricExporter",

    # Provider wiring
    "add_otlp_file_span_exporter", "add_otlp_file_log_exporter", "create_otlp_file_metric_reader",

    # Output
    "OutputSink", "ConsoleOutput", "FileOutput", "BufferOutput", "get_output",

    # Errors
    "OtlpFileError", "SinkClosedError", "ConfigurationError",

    # Diagnostics
    "JSON_ENCODER",
]
