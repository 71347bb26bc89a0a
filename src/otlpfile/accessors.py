"""
Read-only view over the SDK's log record shapes.

The log exporter receives different objects depending on the SDK release:
``LogData`` (an SDK ``LogRecord`` plus its instrumentation scope) or
``ReadableLogRecord`` (an API ``LogRecord`` plus resource, scope and
limits). LogRecordView exposes the fields the log converter needs under one
set of names, so the converter never inspects the SDK types itself.

Optional capabilities that the SDK does not define are also read here:

    - event_id:   a non-zero integer event identifier
    - exception:  an exception instance attached to the record
    - log_scopes: a sequence of mappings holding ambient scope state

Records that do not carry them report 0, None and () respectively.

!!! example
    ```python
    view = LogRecordView(log_data)
    view.severity_number   # 9
    view.event_name        # "user.login"
    ```
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

__all__ = ["LogRecordView"]


class LogRecordView:
    """Uniform accessor for one exported log record."""

    __slots__ = ('_data', '_record')

    def __init__(self, data: Any) -> None:
        self._data = data
        # LogData / ReadableLogRecord wrap the record; a bare record is its own record
        self._record = getattr(data, "log_record", data)

    def __repr__(self) -> str:
        return f"<LogRecordView event_name={self.event_name!r} severity={self.severity_number}>"

    # -- timing --------------------------------------------------------------

    @property
    def timestamp(self) -> int:
        return self._record.timestamp or 0

    @property
    def observed_timestamp(self) -> int:
        return getattr(self._record, "observed_timestamp", None) or 0

    # -- severity ------------------------------------------------------------

    @property
    def severity_number(self) -> int:
        severity = getattr(self._record, "severity_number", None)
        if severity is None:
            return 0
        return int(getattr(severity, "value", severity))

    @property
    def severity_text(self) -> str:
        return getattr(self._record, "severity_text", None) or ""

    # -- content -------------------------------------------------------------

    @property
    def body(self) -> Any:
        return getattr(self._record, "body", None)

    @property
    def attributes(self) -> Mapping[str, Any]:
        return getattr(self._record, "attributes", None) or {}

    @property
    def dropped_attributes(self) -> int:
        dropped = getattr(self._data, "dropped_attributes", None)
        if dropped is None:
            dropped = getattr(self._record, "dropped_attributes", 0)
        return dropped or 0

    @property
    def event_name(self) -> str:
        return getattr(self._record, "event_name", None) or ""

    @property
    def event_id(self) -> int:
        event_id = getattr(self._record, "event_id", None)
        return event_id if isinstance(event_id, int) else 0

    @property
    def exception(self) -> BaseException | None:
        exception = getattr(self._record, "exception", None)
        return exception if isinstance(exception, BaseException) else None

    @property
    def log_scopes(self) -> Sequence[Mapping[str, Any]]:
        return getattr(self._record, "log_scopes", None) or ()

    # -- correlation ---------------------------------------------------------

    @property
    def trace_id(self) -> int:
        return getattr(self._record, "trace_id", None) or 0

    @property
    def span_id(self) -> int:
        return getattr(self._record, "span_id", None) or 0

    @property
    def trace_flags(self) -> int:
        flags = getattr(self._record, "trace_flags", None)
        return int(flags) if flags is not None else 0

    # -- provenance ----------------------------------------------------------

    @property
    def instrumentation_scope(self) -> Any:
        return getattr(self._data, "instrumentation_scope", None)

    @property
    def resource(self) -> Any:
        resource = getattr(self._data, "resource", None)
        if resource is None:
            resource = getattr(self._record, "resource", None)
        return resource
