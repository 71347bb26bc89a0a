"""
LogsData serialization.
"""

from __future__ import annotations

from operator import attrgetter
from typing import BinaryIO

from ..models import LogRecord, LogsData, ResourceLogs, ScopeLogs
from .common import (
    DocumentLayout,
    Record,
    encode_any_value,
    put_attributes,
    put_hex_id,
    put_int,
    put_string,
    put_timestamp,
    serialize_to_stream,
    write_otlp_data,
)

__all__ = [
    "LOGS_LAYOUT",
    "encode_log_record",
    "serialize_logs_data",
]

LOGS_LAYOUT: DocumentLayout[LogsData, ResourceLogs, ScopeLogs, LogRecord] = DocumentLayout(
    resource_blocks_key="resourceLogs",
    scope_blocks_key="scopeLogs",
    records_key="logRecords",
    resource_blocks=attrgetter("resource_logs"),
    unpack_resource_block=attrgetter("resource", "scope_logs", "schema_url"),
    unpack_scope_block=attrgetter("scope", "log_records", "schema_url"),
)


def encode_log_record(log_record: LogRecord) -> Record:
    # Proto field order: time_unix_nano(1), severity_number(2), severity_text(3),
    # body(5), attributes(6), dropped_attributes_count(7), flags(8),
    # trace_id(9), span_id(10), observed_time_unix_nano(11), event_name(12)
    obj: Record = {}
    put_timestamp(obj, "timeUnixNano", log_record.time_unix_nano)
    put_int(obj, "severityNumber", log_record.severity_number)
    put_string(obj, "severityText", log_record.severity_text)
    if log_record.body is not None:
        obj["body"] = encode_any_value(log_record.body)
    put_attributes(obj, log_record.attributes, log_record.dropped_attributes_count)
    put_int(obj, "flags", log_record.flags)
    put_hex_id(obj, "traceId", log_record.trace_id)
    put_hex_id(obj, "spanId", log_record.span_id)
    put_timestamp(obj, "observedTimeUnixNano", log_record.observed_time_unix_nano)
    put_string(obj, "eventName", log_record.event_name)
    return obj


def serialize_logs_data(logs_data: LogsData, stream: BinaryIO) -> None:
    """Write ``logs_data`` as one OTLP JSON line to ``stream``."""
    serialize_to_stream(
        stream,
        lambda out: write_otlp_data(out, logs_data, LOGS_LAYOUT, encode_log_record),
    )
