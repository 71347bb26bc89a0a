"""
OTLP file exporters for the OpenTelemetry SDK.

Each exporter implements the SDK's exporter interface for one signal and
writes every export call as one line of OTLP JSON to an output sink:

    OtlpFileSpanExporter   -> TracesData  ({"resourceSpans": [...]})
    OtlpFileLogExporter    -> LogsData    ({"resourceLogs": [...]})
    OtlpFileMetricExporter -> MetricsData ({"resourceMetrics": [...]})

Export Flow:
    1. Group the batch by instrumentation scope (name, version)
    2. Convert each SDK record to the protocol model (outside the sink lock)
    3. Hold the sink's sync root and stream the document, newline and flush

Error Handling:
    Write failures are logged and reported as FAILURE; nothing is retried.
    After shutdown(), export() writes nothing and returns FAILURE.

!!! example
    ```python
    from opentelemetry.sdk.trace import TracerProvider
    from opentelemetry.sdk.trace.export import SimpleSpanProcessor
    from otlpfile import OtlpFileSpanExporter, get_output

    provider = TracerProvider()
    exporter = OtlpFileSpanExporter(output=get_output("telemetry/traces.jsonl"))
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    ```
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any, BinaryIO

from opentelemetry.sdk.metrics import (
    Counter,
    Histogram,
    ObservableCounter,
    ObservableGauge,
    ObservableUpDownCounter,
    UpDownCounter,
)
from opentelemetry.sdk.metrics.export import (
    AggregationTemporality,
    MetricExporter,
    MetricExportResult,
    MetricsData as SdkMetricsData,
)
from opentelemetry.sdk.trace import ReadableSpan
from opentelemetry.sdk.trace.export import SpanExporter, SpanExportResult

from ._compat import LogRecordExporter, LogRecordExportResult
from .accessors import LogRecordView
from .config import ExporterConfig, Temporality, get_config
from .convert import (
    convert_log_record,
    convert_metrics_data,
    convert_resource,
    convert_scope,
    convert_span,
)
from .grouping import group_by_scope
from .models import (
    LogsData,
    ResourceLogs,
    ResourceSpans,
    ScopeLogs,
    ScopeSpans,
    TracesData,
)
from .output import OutputSink, output_from_config
from .serializer import serialize_logs_data, serialize_metrics_data, serialize_traces_data

logger = logging.getLogger("otlpfile.exporters")

__all__ = [
    "OtlpFileSpanExporter",
    "OtlpFileLogExporter",
    "OtlpFileMetricExporter",
    "build_traces_data",
    "build_logs_data",
]


# =============================================================================
# BATCH -> DOCUMENT
# =============================================================================

def build_traces_data(spans: Sequence[ReadableSpan]) -> TracesData:
    """
    Group and convert a span batch into one TracesData document.

    The resource is taken from the first span; the SDK gives every span of a
    provider the same resource.
    """
    if not spans:
        return TracesData()

    scope_blocks = []
    for group in group_by_scope(spans, lambda span: span.instrumentation_scope).values():
        sdk_scope = group[0].instrumentation_scope
        scope_blocks.append(
            ScopeSpans(
                scope=convert_scope(sdk_scope),
                spans=[convert_span(span) for span in group],
                schema_url=(sdk_scope.schema_url or "") if sdk_scope is not None else "",
            )
        )

    sdk_resource = spans[0].resource
    return TracesData(
        resource_spans=[
            ResourceSpans(
                resource=convert_resource(sdk_resource),
                scope_spans=scope_blocks,
                schema_url=(sdk_resource.schema_url or "") if sdk_resource is not None else "",
            )
        ]
    )


def build_logs_data(batch: Sequence[Any]) -> LogsData:
    """Group and convert a log batch (LogData or ReadableLogRecord) into one LogsData document."""
    if not batch:
        return LogsData()

    views = [LogRecordView(item) for item in batch]
    scope_blocks = []
    for group in group_by_scope(views, lambda view: view.instrumentation_scope).values():
        sdk_scope = group[0].instrumentation_scope
        scope_blocks.append(
            ScopeLogs(
                scope=convert_scope(sdk_scope),
                log_records=[convert_log_record(view) for view in group],
                schema_url=(getattr(sdk_scope, "schema_url", None) or "") if sdk_scope is not None else "",
            )
        )

    sdk_resource = views[0].resource
    return LogsData(
        resource_logs=[
            ResourceLogs(
                resource=convert_resource(sdk_resource),
                scope_logs=scope_blocks,
                schema_url=(getattr(sdk_resource, "schema_url", None) or "") if sdk_resource is not None else "",
            )
        ]
    )


# =============================================================================
# SHARED WRITE PATH
# =============================================================================

class _OtlpFileWriter:
    """
    Output handling shared by the three exporters.

    Owns the sink reference and the shutdown flag; write() holds the sink's
    sync root for one whole document.
    """

    __slots__ = ('_output', '_signal', '_shutdown')

    def __init__(self, output: OutputSink, signal: str) -> None:
        self._output = output
        self._signal = signal
        self._shutdown = False

    @property
    def output(self) -> OutputSink:
        return self._output

    @property
    def is_shutdown(self) -> bool:
        return self._shutdown

    def write(self, serialize: Callable[[BinaryIO], None]) -> bool:
        """Serialize one document to the sink. Returns False on failure."""
        try:
            with self._output.sync_root:
                serialize(self._output.stream)
            return True
        except OSError as e:
            logger.warning(
                f"Export of {self._signal} to {self._output!r} failed: {e}",
                exc_info=logger.isEnabledFor(logging.DEBUG),
            )
            return False

    def flush(self) -> bool:
        if self._shutdown:
            return True
        try:
            with self._output.sync_root:
                self._output.stream.flush()
            return True
        except OSError as e:
            logger.warning(f"Flush of {self._output!r} failed: {e}")
            return False

    def shutdown(self) -> None:
        if self._shutdown:
            logger.debug(f"{self._signal} exporter shutdown called more than once")
            return
        # Shared sinks stay open; other exporters may still write to them
        self.flush()
        self._shutdown = True


def _resolve_output(output: OutputSink | None, config: ExporterConfig | None) -> OutputSink:
    if output is not None:
        return output
    return output_from_config(config or get_config())


# =============================================================================
# EXPORTERS
# =============================================================================

class OtlpFileSpanExporter(SpanExporter):
    """
    SpanExporter writing TracesData lines.

    Args:
        output: Destination sink; defaults to the configured shared sink
        config: Configuration used to pick the default sink
    """

    def __init__(
        self,
        output: OutputSink | None = None,
        config: ExporterConfig | None = None,
    ) -> None:
        self._writer = _OtlpFileWriter(_resolve_output(output, config), "traces")

    def __repr__(self) -> str:
        return f"OtlpFileSpanExporter(output={self._writer.output!r})"

    @property
    def output(self) -> OutputSink:
        return self._writer.output

    def export(self, spans: Sequence[ReadableSpan]) -> SpanExportResult:
        if self._writer.is_shutdown:
            logger.warning("Exporter already shut down, dropping traces export")
            return SpanExportResult.FAILURE

        traces_data = build_traces_data(spans)
        ok = self._writer.write(lambda stream: serialize_traces_data(traces_data, stream))
        return SpanExportResult.SUCCESS if ok else SpanExportResult.FAILURE

    def shutdown(self) -> None:
        self._writer.shutdown()

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        return self._writer.flush()


class OtlpFileLogExporter(LogRecordExporter):
    """
    LogRecordExporter writing LogsData lines.

    Accepts both LogData and ReadableLogRecord batches.
    """

    def __init__(
        self,
        output: OutputSink | None = None,
        config: ExporterConfig | None = None,
    ) -> None:
        self._writer = _OtlpFileWriter(_resolve_output(output, config), "logs")

    def __repr__(self) -> str:
        return f"OtlpFileLogExporter(output={self._writer.output!r})"

    @property
    def output(self) -> OutputSink:
        return self._writer.output

    def export(self, batch: Sequence[Any]) -> LogRecordExportResult:
        if self._writer.is_shutdown:
            logger.warning("Exporter already shut down, dropping logs export")
            return LogRecordExportResult.FAILURE

        logs_data = build_logs_data(batch)
        ok = self._writer.write(lambda stream: serialize_logs_data(logs_data, stream))
        return LogRecordExportResult.SUCCESS if ok else LogRecordExportResult.FAILURE

    def shutdown(self) -> None:
        self._writer.shutdown()

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        return self._writer.flush()


def _preferred_temporality(temporality: str) -> dict[type, AggregationTemporality]:
    """Instrument -> temporality for a "cumulative" or "delta" preference."""
    if temporality == Temporality.DELTA.value:
        # Up/down counters stay cumulative, as in the OTLP exporters' delta preference
        return {
            Counter: AggregationTemporality.DELTA,
            UpDownCounter: AggregationTemporality.CUMULATIVE,
            Histogram: AggregationTemporality.DELTA,
            ObservableCounter: AggregationTemporality.DELTA,
            ObservableUpDownCounter: AggregationTemporality.CUMULATIVE,
            ObservableGauge: AggregationTemporality.CUMULATIVE,
        }
    return {
        instrument: AggregationTemporality.CUMULATIVE
        for instrument in (
            Counter,
            UpDownCounter,
            Histogram,
            ObservableCounter,
            ObservableUpDownCounter,
            ObservableGauge,
        )
    }


class OtlpFileMetricExporter(MetricExporter):
    """
    MetricExporter writing MetricsData lines.

    The preferred temporality comes from ``config.metrics_temporality``
    unless ``preferred_temporality`` is given explicitly.
    """

    def __init__(
        self,
        output: OutputSink | None = None,
        config: ExporterConfig | None = None,
        preferred_temporality: dict[type, AggregationTemporality] | None = None,
        preferred_aggregation: dict[type, Any] | None = None,
    ) -> None:
        config = config or get_config()
        if preferred_temporality is None:
            preferred_temporality = _preferred_temporality(config.metrics_temporality)
        super().__init__(
            preferred_temporality=preferred_temporality,
            preferred_aggregation=preferred_aggregation,
        )
        self._writer = _OtlpFileWriter(_resolve_output(output, config), "metrics")

    def __repr__(self) -> str:
        return f"OtlpFileMetricExporter(output={self._writer.output!r})"

    @property
    def output(self) -> OutputSink:
        return self._writer.output

    def export(
        self,
        metrics_data: SdkMetricsData,
        timeout_millis: float = 10_000,
        **kwargs: Any,
    ) -> MetricExportResult:
        if self._writer.is_shutdown:
            logger.warning("Exporter already shut down, dropping metrics export")
            return MetricExportResult.FAILURE

        converted = convert_metrics_data(metrics_data)
        if not converted.resource_metrics:
            logger.debug("No supported metrics in collection, nothing written")
            return MetricExportResult.SUCCESS

        ok = self._writer.write(lambda stream: serialize_metrics_data(converted, stream))
        return MetricExportResult.SUCCESS if ok else MetricExportResult.FAILURE

    def force_flush(self, timeout_millis: float = 10_000) -> bool:
        return self._writer.flush()

    def shutdown(self, timeout_millis: float = 30_000, **kwargs: Any) -> None:
        self._writer.shutdown()
