"""
Wiring helpers for SDK providers.

These attach the OTLP file exporters to a TracerProvider or LoggerProvider,
or build a metric reader for a MeterProvider, choosing simple or batching
processors from the configuration.

!!! example
    ```python
    from opentelemetry.sdk.metrics import MeterProvider
    from opentelemetry.sdk.trace import TracerProvider
    import otlpfile

    otlpfile.configure(output_path="telemetry.jsonl")

    tracer_provider = TracerProvider()
    otlpfile.add_otlp_file_span_exporter(tracer_provider)

    meter_provider = MeterProvider(metric_readers=[otlpfile.create_otlp_file_metric_reader()])
    ```
"""

from __future__ import annotations

import logging

from opentelemetry.sdk._logs import LoggerProvider
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor, SimpleLogRecordProcessor
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, SimpleSpanProcessor

from .config import ExporterConfig, get_config
from .exporters import OtlpFileLogExporter, OtlpFileMetricExporter, OtlpFileSpanExporter
from .output import OutputSink

logger = logging.getLogger("otlpfile.providers")

__all__ = [
    "add_otlp_file_span_exporter",
    "add_otlp_file_log_exporter",
    "create_otlp_file_metric_reader",
]


def add_otlp_file_span_exporter(
    provider: TracerProvider,
    output: OutputSink | None = None,
    config: ExporterConfig | None = None,
    batch: bool | None = None,
) -> OtlpFileSpanExporter:
    """
    Register an OtlpFileSpanExporter with a TracerProvider.

    Args:
        provider: The tracer provider
        output: Destination sink (default: the configured shared sink)
        config: Configuration (default: get_config())
        batch: Override ``config.batch``; True uses a BatchSpanProcessor

    Returns:
        The registered exporter
    """
    config = config or get_config()
    exporter = OtlpFileSpanExporter(output=output, config=config)
    use_batch = config.batch if batch is None else batch
    processor = BatchSpanProcessor(exporter) if use_batch else SimpleSpanProcessor(exporter)
    provider.add_span_processor(processor)
    logger.debug(f"Registered {exporter!r} with {type(processor).__name__}")
    return exporter


def add_otlp_file_log_exporter(
    provider: LoggerProvider,
    output: OutputSink | None = None,
    config: ExporterConfig | None = None,
    batch: bool | None = None,
) -> OtlpFileLogExporter:
    """Register an OtlpFileLogExporter with a LoggerProvider (see add_otlp_file_span_exporter)."""
    config = config or get_config()
    exporter = OtlpFileLogExporter(output=output, config=config)
    use_batch = config.batch if batch is None else batch
    processor = BatchLogRecordProcessor(exporter) if use_batch else SimpleLogRecordProcessor(exporter)
    provider.add_log_record_processor(processor)
    logger.debug(f"Registered {exporter!r} with {type(processor).__name__}")
    return exporter


def create_otlp_file_metric_reader(
    output: OutputSink | None = None,
    config: ExporterConfig | None = None,
    export_interval_millis: float | None = None,
) -> PeriodicExportingMetricReader:
    """
    Build a PeriodicExportingMetricReader around an OtlpFileMetricExporter.

    Pass the reader to ``MeterProvider(metric_readers=[...])``. The interval
    defaults to ``config.metric_export_interval_ms``.
    """
    config = config or get_config()
    exporter = OtlpFileMetricExporter(output=output, config=config)
    interval = config.metric_export_interval_ms if export_interval_millis is None else export_interval_millis
    return PeriodicExportingMetricReader(exporter, export_interval_millis=interval)
