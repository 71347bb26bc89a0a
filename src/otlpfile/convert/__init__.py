"""
otlpfile.convert
~~~~~~~~~~~~~~~~

Pure mapping functions from OpenTelemetry SDK records to the protocol model
in ``otlpfile.models``.
"""

from .common import (
    convert_resource,
    convert_scope,
    span_id_bytes,
    to_any_value,
    to_attributes,
    trace_id_bytes,
)
from .logs import convert_log_record, severity_text_for
from .metrics import convert_metric, convert_metrics_data
from .traces import convert_span

__all__ = [
    "to_any_value",
    "to_attributes",
    "trace_id_bytes",
    "span_id_bytes",
    "convert_resource",
    "convert_scope",
    "convert_span",
    "convert_log_record",
    "severity_text_for",
    "convert_metric",
    "convert_metrics_data",
]
