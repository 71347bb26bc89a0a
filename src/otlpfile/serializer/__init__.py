"""
otlpfile.serializer
~~~~~~~~~~~~~~~~~~~

Streaming writer for the OTLP JSON Protobuf Encoding.

The ``common`` submodule holds the encoding primitives and the generic
Resource -> Scope -> Record traversal; ``traces``, ``logs`` and ``metrics``
only supply their document layout and per-record encoder.
"""

from .common import DocumentLayout, serialize_to_stream, write_otlp_data
from .logs import encode_log_record, serialize_logs_data
from .metrics import encode_metric, serialize_metrics_data
from .traces import encode_span, serialize_traces_data

__all__ = [
    "DocumentLayout",
    "write_otlp_data",
    "serialize_to_stream",
    "encode_span",
    "encode_log_record",
    "encode_metric",
    "serialize_traces_data",
    "serialize_logs_data",
    "serialize_metrics_data",
]
