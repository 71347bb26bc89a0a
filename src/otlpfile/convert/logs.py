"""
Log record -> LogRecord conversion.

Attribute order in the output:
    1. event.id, when the record carries a non-zero event id
    2. the record's own attributes, unchanged
    3. attributes of each active log scope, flattened in order
    4. exception.type / exception.message / exception.stacktrace
"""

from __future__ import annotations

import traceback

from ..accessors import LogRecordView
from ..models import KeyValue, LogRecord, SeverityNumber
from .common import safe_str, span_id_bytes, to_any_value, to_attributes, to_key_value, trace_id_bytes

__all__ = ["convert_log_record", "severity_text_for"]

# Lower bound of each severity range -> short name
_SEVERITY_NAMES = (
    (SeverityNumber.FATAL, "Fatal"),
    (SeverityNumber.ERROR, "Error"),
    (SeverityNumber.WARN, "Warn"),
    (SeverityNumber.INFO, "Info"),
    (SeverityNumber.DEBUG, "Debug"),
    (SeverityNumber.TRACE, "Trace"),
)


def severity_text_for(severity_number: int) -> str:
    """Short severity name for a severity number ("" when unspecified)."""
    for lower_bound, name in _SEVERITY_NAMES:
        if severity_number >= lower_bound:
            return name
    return ""


def _exception_type_name(exc: BaseException) -> str:
    exc_type = type(exc)
    if exc_type.__module__ == "builtins":
        return exc_type.__qualname__
    return f"{exc_type.__module__}.{exc_type.__qualname__}"


def _exception_attributes(exc: BaseException) -> list[KeyValue]:
    stacktrace = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return [
        to_key_value("exception.type", _exception_type_name(exc)),
        to_key_value("exception.message", str(exc)),
        to_key_value("exception.stacktrace", stacktrace),
    ]


def convert_log_record(view: LogRecordView) -> LogRecord:
    """Convert one log record, read through its accessor."""
    severity_number = view.severity_number

    attributes: list[KeyValue] = []
    if view.event_id:
        attributes.append(to_key_value("event.id", view.event_id))
    attributes.extend(to_attributes(view.attributes))
    for scope_state in view.log_scopes:
        attributes.extend(to_attributes(scope_state))
    exc = view.exception
    if exc is not None:
        attributes.extend(_exception_attributes(exc))

    if not SeverityNumber.UNSPECIFIED <= severity_number <= SeverityNumber.FATAL4:
        severity_number = SeverityNumber.UNSPECIFIED

    body = view.body
    has_body = body is not None and not (isinstance(body, str) and not body)
    return LogRecord(
        time_unix_nano=view.timestamp,
        severity_number=SeverityNumber(severity_number),
        severity_text=safe_str(view.severity_text) or severity_text_for(severity_number),
        body=to_any_value(body) if has_body else None,
        attributes=attributes,
        dropped_attributes_count=view.dropped_attributes,
        flags=view.trace_flags,
        trace_id=trace_id_bytes(view.trace_id),
        span_id=span_id_bytes(view.span_id),
        observed_time_unix_nano=view.observed_timestamp or view.timestamp,
        event_name=safe_str(view.event_name),
    )
