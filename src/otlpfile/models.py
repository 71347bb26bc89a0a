"""
OTLP protocol data model for otlpfile.

This module defines the intermediate representation that the signal
converters produce and the JSON serializer consumes. The shapes mirror the
OTLP protobuf messages (opentelemetry/proto/{common,resource,trace,logs,
metrics}/v1) field for field, using snake_case names.

Conventions:
    - Identifiers (trace_id, span_id, ...) are raw ``bytes``; an empty value
      means "not set".
    - Timestamps are integer nanoseconds since the Unix epoch; 0 means
      "not set".
    - Enums are ``IntEnum`` with the protocol's numeric values, so they
      serialize as integers.
    - Repeated fields are plain lists, preserved in insertion order.

Document Structure:
    TracesData  -> ResourceSpans   -> ScopeSpans   -> Span
    LogsData    -> ResourceLogs    -> ScopeLogs    -> LogRecord
    MetricsData -> ResourceMetrics -> ScopeMetrics -> Metric
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Union

__all__ = [
    # Common
    "AnyValueKind",
    "AnyValue",
    "KeyValue",
    "InstrumentationScope",
    "Resource",
    # Traces
    "SpanKind",
    "StatusCode",
    "Status",
    "SpanEvent",
    "SpanLink",
    "Span",
    "ScopeSpans",
    "ResourceSpans",
    "TracesData",
    # Logs
    "SeverityNumber",
    "LogRecord",
    "ScopeLogs",
    "ResourceLogs",
    "LogsData",
    # Metrics
    "AggregationTemporality",
    "Exemplar",
    "NumberDataPoint",
    "HistogramDataPoint",
    "Buckets",
    "ExponentialHistogramDataPoint",
    "ValueAtQuantile",
    "SummaryDataPoint",
    "Gauge",
    "Sum",
    "Histogram",
    "ExponentialHistogram",
    "Summary",
    "MetricData",
    "Metric",
    "ScopeMetrics",
    "ResourceMetrics",
    "MetricsData",
]


# =============================================================================
# COMMON
# =============================================================================

class AnyValueKind(str, Enum):
    """Populated variant of an AnyValue. Values are the OTLP JSON field names."""
    STRING = "stringValue"
    BOOL = "boolValue"
    INT = "intValue"
    DOUBLE = "doubleValue"
    ARRAY = "arrayValue"
    KVLIST = "kvlistValue"
    BYTES = "bytesValue"


@dataclass(slots=True, frozen=True)
class AnyValue:
    """
    Tagged union over the OTLP attribute value types.

    Exactly one variant is populated. ARRAY holds ``list[AnyValue]`` and
    KVLIST holds ``list[KeyValue]``, so values nest arbitrarily deep.

    !!! example
        ```python
        AnyValue.of_string("GET")
        AnyValue.of_array([AnyValue.of_int(1), AnyValue.of_int(2)])
        ```
    """
    kind: AnyValueKind
    value: Any

    @classmethod
    def of_string(cls, value: str) -> AnyValue:
        return cls(AnyValueKind.STRING, value)

    @classmethod
    def of_bool(cls, value: bool) -> AnyValue:
        return cls(AnyValueKind.BOOL, value)

    @classmethod
    def of_int(cls, value: int) -> AnyValue:
        return cls(AnyValueKind.INT, value)

    @classmethod
    def of_double(cls, value: float) -> AnyValue:
        return cls(AnyValueKind.DOUBLE, value)

    @classmethod
    def of_bytes(cls, value: bytes) -> AnyValue:
        return cls(AnyValueKind.BYTES, value)

    @classmethod
    def of_array(cls, values: list[AnyValue]) -> AnyValue:
        return cls(AnyValueKind.ARRAY, values)

    @classmethod
    def of_kvlist(cls, values: list[KeyValue]) -> AnyValue:
        return cls(AnyValueKind.KVLIST, values)


@dataclass(slots=True, frozen=True)
class KeyValue:
    """A key/value attribute. Duplicate keys are legal and keep their order."""
    key: str
    value: AnyValue | None = None


@dataclass(slots=True)
class InstrumentationScope:
    """The logical producer (tracer, meter or logger) of a group of records."""
    name: str = ""
    version: str = ""
    attributes: list[KeyValue] = field(default_factory=list)
    dropped_attributes_count: int = 0


@dataclass(slots=True)
class Resource:
    """Attributes describing the process or service producing telemetry."""
    attributes: list[KeyValue] = field(default_factory=list)
    dropped_attributes_count: int = 0


# =============================================================================
# TRACES
# =============================================================================

class SpanKind(IntEnum):
    """OTLP span kinds (1-indexed, 0 is unspecified)."""
    UNSPECIFIED = 0
    INTERNAL = 1
    SERVER = 2
    CLIENT = 3
    PRODUCER = 4
    CONSUMER = 5


class StatusCode(IntEnum):
    """OTLP status codes."""
    UNSET = 0
    OK = 1
    ERROR = 2


@dataclass(slots=True)
class Status:
    message: str = ""
    code: StatusCode = StatusCode.UNSET


@dataclass(slots=True)
class SpanEvent:
    """A point-in-time event recorded during a span's lifetime."""
    time_unix_nano: int = 0
    name: str = ""
    attributes: list[KeyValue] = field(default_factory=list)
    dropped_attributes_count: int = 0


@dataclass(slots=True)
class SpanLink:
    """A reference from one span to another, possibly in a different trace."""
    trace_id: bytes = b""
    span_id: bytes = b""
    trace_state: str = ""
    attributes: list[KeyValue] = field(default_factory=list)
    dropped_attributes_count: int = 0
    flags: int = 0


@dataclass(slots=True)
class Span:
    """
    A single traced operation.

    Attributes:
        trace_id: 16 bytes identifying the trace
        span_id: 8 bytes identifying this span
        parent_span_id: 8 bytes, empty for root spans
        flags: W3C trace flags of the span context
        kind: SpanKind enum value
        status: None when the span status was never set
    """
    trace_id: bytes = b""
    span_id: bytes = b""
    trace_state: str = ""
    parent_span_id: bytes = b""
    flags: int = 0
    name: str = ""
    kind: SpanKind = SpanKind.UNSPECIFIED
    start_time_unix_nano: int = 0
    end_time_unix_nano: int = 0
    attributes: list[KeyValue] = field(default_factory=list)
    dropped_attributes_count: int = 0
    events: list[SpanEvent] = field(default_factory=list)
    dropped_events_count: int = 0
    links: list[SpanLink] = field(default_factory=list)
    dropped_links_count: int = 0
    status: Status | None = None


@dataclass(slots=True)
class ScopeSpans:
    scope: InstrumentationScope | None = None
    spans: list[Span] = field(default_factory=list)
    schema_url: str = ""


@dataclass(slots=True)
class ResourceSpans:
    resource: Resource | None = None
    scope_spans: list[ScopeSpans] = field(default_factory=list)
    schema_url: str = ""


@dataclass(slots=True)
class TracesData:
    resource_spans: list[ResourceSpans] = field(default_factory=list)


# =============================================================================
# LOGS
# =============================================================================

class SeverityNumber(IntEnum):
    """OTLP log severity numbers."""
    UNSPECIFIED = 0
    TRACE = 1
    TRACE2 = 2
    TRACE3 = 3
    TRACE4 = 4
    DEBUG = 5
    DEBUG2 = 6
    DEBUG3 = 7
    DEBUG4 = 8
    INFO = 9
    INFO2 = 10
    INFO3 = 11
    INFO4 = 12
    WARN = 13
    WARN2 = 14
    WARN3 = 15
    WARN4 = 16
    ERROR = 17
    ERROR2 = 18
    ERROR3 = 19
    ERROR4 = 20
    FATAL = 21
    FATAL2 = 22
    FATAL3 = 23
    FATAL4 = 24


@dataclass(slots=True)
class LogRecord:
    """A single log record, optionally correlated with a span."""
    time_unix_nano: int = 0
    severity_number: SeverityNumber = SeverityNumber.UNSPECIFIED
    severity_text: str = ""
    body: AnyValue | None = None
    attributes: list[KeyValue] = field(default_factory=list)
    dropped_attributes_count: int = 0
    flags: int = 0
    trace_id: bytes = b""
    span_id: bytes = b""
    observed_time_unix_nano: int = 0
    event_name: str = ""


@dataclass(slots=True)
class ScopeLogs:
    scope: InstrumentationScope | None = None
    log_records: list[LogRecord] = field(default_factory=list)
    schema_url: str = ""


@dataclass(slots=True)
class ResourceLogs:
    resource: Resource | None = None
    scope_logs: list[ScopeLogs] = field(default_factory=list)
    schema_url: str = ""


@dataclass(slots=True)
class LogsData:
    resource_logs: list[ResourceLogs] = field(default_factory=list)


# =============================================================================
# METRICS
# =============================================================================

class AggregationTemporality(IntEnum):
    """Whether reported values are deltas or cumulative since start."""
    UNSPECIFIED = 0
    DELTA = 1
    CUMULATIVE = 2


@dataclass(slots=True)
class Exemplar:
    """A sampled raw measurement linking an aggregate back to a trace."""
    filtered_attributes: list[KeyValue] = field(default_factory=list)
    time_unix_nano: int = 0
    value: int | float | None = None
    span_id: bytes = b""
    trace_id: bytes = b""


@dataclass(slots=True)
class NumberDataPoint:
    """Gauge or Sum point. An ``int`` value encodes as asInt, a ``float`` as asDouble."""
    attributes: list[KeyValue] = field(default_factory=list)
    start_time_unix_nano: int = 0
    time_unix_nano: int = 0
    value: int | float | None = None
    exemplars: list[Exemplar] = field(default_factory=list)
    flags: int = 0


@dataclass(slots=True)
class HistogramDataPoint:
    """
    Explicit-bucket histogram point.

    ``bucket_counts`` has ``len(explicit_bounds) + 1`` entries; the last
    bucket is the implicit +Inf upper bound. ``sum``, ``min`` and ``max``
    are optional in the protocol and stay None when not tracked.
    """
    attributes: list[KeyValue] = field(default_factory=list)
    start_time_unix_nano: int = 0
    time_unix_nano: int = 0
    count: int = 0
    sum: float | None = None
    bucket_counts: list[int] = field(default_factory=list)
    explicit_bounds: list[float] = field(default_factory=list)
    exemplars: list[Exemplar] = field(default_factory=list)
    flags: int = 0
    min: float | None = None
    max: float | None = None


@dataclass(slots=True)
class Buckets:
    """Contiguous exponential buckets starting at ``offset``."""
    offset: int = 0
    bucket_counts: list[int] = field(default_factory=list)


@dataclass(slots=True)
class ExponentialHistogramDataPoint:
    attributes: list[KeyValue] = field(default_factory=list)
    start_time_unix_nano: int = 0
    time_unix_nano: int = 0
    count: int = 0
    sum: float | None = None
    scale: int = 0
    zero_count: int = 0
    positive: Buckets | None = None
    negative: Buckets | None = None
    flags: int = 0
    exemplars: list[Exemplar] = field(default_factory=list)
    min: float | None = None
    max: float | None = None
    zero_threshold: float = 0.0


@dataclass(slots=True)
class ValueAtQuantile:
    quantile: float = 0.0
    value: float = 0.0


@dataclass(slots=True)
class SummaryDataPoint:
    attributes: list[KeyValue] = field(default_factory=list)
    start_time_unix_nano: int = 0
    time_unix_nano: int = 0
    count: int = 0
    sum: float = 0.0
    quantile_values: list[ValueAtQuantile] = field(default_factory=list)
    flags: int = 0


@dataclass(slots=True)
class Gauge:
    data_points: list[NumberDataPoint] = field(default_factory=list)


@dataclass(slots=True)
class Sum:
    data_points: list[NumberDataPoint] = field(default_factory=list)
    aggregation_temporality: AggregationTemporality = AggregationTemporality.UNSPECIFIED
    is_monotonic: bool = False


@dataclass(slots=True)
class Histogram:
    data_points: list[HistogramDataPoint] = field(default_factory=list)
    aggregation_temporality: AggregationTemporality = AggregationTemporality.UNSPECIFIED


@dataclass(slots=True)
class ExponentialHistogram:
    data_points: list[ExponentialHistogramDataPoint] = field(default_factory=list)
    aggregation_temporality: AggregationTemporality = AggregationTemporality.UNSPECIFIED


@dataclass(slots=True)
class Summary:
    data_points: list[SummaryDataPoint] = field(default_factory=list)


MetricData = Union[Gauge, Sum, Histogram, ExponentialHistogram, Summary]


@dataclass(slots=True)
class Metric:
    """A named metric carrying exactly one data shape."""
    name: str = ""
    description: str = ""
    unit: str = ""
    data: MetricData | None = None
    metadata: list[KeyValue] = field(default_factory=list)


@dataclass(slots=True)
class ScopeMetrics:
    scope: InstrumentationScope | None = None
    metrics: list[Metric] = field(default_factory=list)
    schema_url: str = ""


@dataclass(slots=True)
class ResourceMetrics:
    resource: Resource | None = None
    scope_metrics: list[ScopeMetrics] = field(default_factory=list)
    schema_url: str = ""


@dataclass(slots=True)
class MetricsData:
    resource_metrics: list[ResourceMetrics] = field(default_factory=list)
