"""
TracesData serialization.
"""

from __future__ import annotations

from operator import attrgetter
from typing import BinaryIO

from ..models import ResourceSpans, ScopeSpans, Span, SpanEvent, SpanLink, Status, TracesData
from .common import (
    DocumentLayout,
    Record,
    put_attributes,
    put_hex_id,
    put_int,
    put_string,
    put_timestamp,
    serialize_to_stream,
    write_otlp_data,
)

__all__ = [
    "TRACES_LAYOUT",
    "encode_span",
    "serialize_traces_data",
]

TRACES_LAYOUT: DocumentLayout[TracesData, ResourceSpans, ScopeSpans, Span] = DocumentLayout(
    resource_blocks_key="resourceSpans",
    scope_blocks_key="scopeSpans",
    records_key="spans",
    resource_blocks=attrgetter("resource_spans"),
    unpack_resource_block=attrgetter("resource", "scope_spans", "schema_url"),
    unpack_scope_block=attrgetter("scope", "spans", "schema_url"),
)


def encode_span(span: Span) -> Record:
    # Proto field order: trace_id(1), span_id(2), trace_state(3), parent_span_id(4),
    # flags(16), name(5), kind(6), start_time_unix_nano(7), end_time_unix_nano(8),
    # attributes(9), dropped_attributes_count(10), events(11), dropped_events_count(12),
    # links(13), dropped_links_count(14), status(15)
    obj: Record = {}
    put_hex_id(obj, "traceId", span.trace_id)
    put_hex_id(obj, "spanId", span.span_id)
    put_string(obj, "traceState", span.trace_state)
    put_hex_id(obj, "parentSpanId", span.parent_span_id)
    put_int(obj, "flags", span.flags)
    put_string(obj, "name", span.name)
    put_int(obj, "kind", span.kind)
    put_timestamp(obj, "startTimeUnixNano", span.start_time_unix_nano)
    put_timestamp(obj, "endTimeUnixNano", span.end_time_unix_nano)
    put_attributes(obj, span.attributes, span.dropped_attributes_count)
    if span.events:
        obj["events"] = [_encode_event(event) for event in span.events]
    put_int(obj, "droppedEventsCount", span.dropped_events_count)
    if span.links:
        obj["links"] = [_encode_link(link) for link in span.links]
    put_int(obj, "droppedLinksCount", span.dropped_links_count)
    if span.status is not None:
        obj["status"] = _encode_status(span.status)
    return obj


def _encode_event(event: SpanEvent) -> Record:
    obj: Record = {}
    put_timestamp(obj, "timeUnixNano", event.time_unix_nano)
    put_string(obj, "name", event.name)
    put_attributes(obj, event.attributes, event.dropped_attributes_count)
    return obj


def _encode_link(link: SpanLink) -> Record:
    obj: Record = {}
    put_hex_id(obj, "traceId", link.trace_id)
    put_hex_id(obj, "spanId", link.span_id)
    put_string(obj, "traceState", link.trace_state)
    put_attributes(obj, link.attributes, link.dropped_attributes_count)
    put_int(obj, "flags", link.flags)
    return obj


def _encode_status(status: Status) -> Record:
    obj: Record = {}
    put_string(obj, "message", status.message)
    put_int(obj, "code", status.code)
    return obj


def serialize_traces_data(traces_data: TracesData, stream: BinaryIO) -> None:
    """Write ``traces_data`` as one OTLP JSON line to ``stream``."""
    serialize_to_stream(
        stream,
        lambda out: write_otlp_data(out, traces_data, TRACES_LAYOUT, encode_span),
    )
