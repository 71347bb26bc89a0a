"""
ReadableSpan -> Span conversion.
"""

from __future__ import annotations

from opentelemetry.sdk.trace import Event, ReadableSpan
from opentelemetry.trace import Link
from opentelemetry.trace import StatusCode as SdkStatusCode

from ..models import Span, SpanEvent, SpanKind, SpanLink, Status, StatusCode
from .common import safe_str, span_id_bytes, to_attributes, trace_id_bytes

__all__ = ["convert_span", "convert_status"]


def convert_span(span: ReadableSpan) -> Span:
    """
    Convert a finished SDK span.

    The SDK's SpanKind is 0-indexed (INTERNAL=0 ... CONSUMER=4) while OTLP
    reserves 0 for UNSPECIFIED, so the kind is shifted by one.
    """
    context = span.context
    parent = span.parent

    otlp_span = Span(
        name=safe_str(span.name),
        kind=SpanKind(span.kind.value + 1),
        start_time_unix_nano=span.start_time or 0,
        end_time_unix_nano=span.end_time or 0,
        attributes=to_attributes(span.attributes),
        dropped_attributes_count=span.dropped_attributes,
        events=[_convert_event(event) for event in span.events],
        dropped_events_count=span.dropped_events,
        links=[_convert_link(link) for link in span.links],
        dropped_links_count=span.dropped_links,
        status=convert_status(span),
    )

    if context is not None:
        otlp_span.trace_id = trace_id_bytes(context.trace_id)
        otlp_span.span_id = span_id_bytes(context.span_id)
        otlp_span.flags = int(context.trace_flags)
        if context.trace_state:
            otlp_span.trace_state = safe_str(context.trace_state.to_header())

    if parent is not None:
        otlp_span.parent_span_id = span_id_bytes(parent.span_id)

    return otlp_span


def convert_status(span: ReadableSpan) -> Status | None:
    """Span status, or None when it was never set (UNSET with no description)."""
    status = span.status
    if status is None:
        return None
    if status.status_code is SdkStatusCode.UNSET and not status.description:
        return None
    return Status(
        message=safe_str(status.description),
        code=StatusCode(status.status_code.value),
    )


def _convert_event(event: Event) -> SpanEvent:
    return SpanEvent(
        time_unix_nano=event.timestamp or 0,
        name=safe_str(event.name),
        attributes=to_attributes(event.attributes),
        dropped_attributes_count=event.dropped_attributes,
    )


def _convert_link(link: Link) -> SpanLink:
    context = link.context
    return SpanLink(
        trace_id=trace_id_bytes(context.trace_id),
        span_id=span_id_bytes(context.span_id),
        trace_state=safe_str(context.trace_state.to_header()) if context.trace_state else "",
        attributes=to_attributes(link.attributes),
        dropped_attributes_count=link.dropped_attributes,
        flags=int(context.trace_flags),
    )
