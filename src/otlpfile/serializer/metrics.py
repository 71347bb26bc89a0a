"""
MetricsData serialization.

Each Metric carries exactly one data shape, written under its camelCase key
("gauge", "sum", "histogram", "exponentialHistogram", "summary"). Counts and
bucket counts are uint64/fixed64 and therefore decimal strings; bounds,
sums and quantiles are doubles and therefore JSON numbers.
"""

from __future__ import annotations

from operator import attrgetter
from typing import BinaryIO

from ..models import (
    Buckets,
    Exemplar,
    ExponentialHistogram,
    ExponentialHistogramDataPoint,
    Gauge,
    Histogram,
    HistogramDataPoint,
    Metric,
    MetricsData,
    NumberDataPoint,
    ResourceMetrics,
    ScopeMetrics,
    Sum,
    Summary,
    SummaryDataPoint,
    ValueAtQuantile,
)
from .common import (
    DocumentLayout,
    Record,
    encode_double,
    encode_key_value,
    put_attributes,
    put_double,
    put_hex_id,
    put_int,
    put_string,
    put_timestamp,
    put_uint64,
    serialize_to_stream,
    write_otlp_data,
)

__all__ = [
    "METRICS_LAYOUT",
    "encode_metric",
    "serialize_metrics_data",
]

METRICS_LAYOUT: DocumentLayout[MetricsData, ResourceMetrics, ScopeMetrics, Metric] = DocumentLayout(
    resource_blocks_key="resourceMetrics",
    scope_blocks_key="scopeMetrics",
    records_key="metrics",
    resource_blocks=attrgetter("resource_metrics"),
    unpack_resource_block=attrgetter("resource", "scope_metrics", "schema_url"),
    unpack_scope_block=attrgetter("scope", "metrics", "schema_url"),
)


def encode_metric(metric: Metric) -> Record:
    # Proto field order: name(1), description(2), unit(3),
    # data oneof: gauge(5), sum(7), histogram(9), exponential_histogram(10), summary(11),
    # metadata(12)
    obj: Record = {}
    put_string(obj, "name", metric.name)
    put_string(obj, "description", metric.description)
    put_string(obj, "unit", metric.unit)

    data = metric.data
    if isinstance(data, Gauge):
        obj["gauge"] = _encode_gauge(data)
    elif isinstance(data, Sum):
        obj["sum"] = _encode_sum(data)
    elif isinstance(data, Histogram):
        obj["histogram"] = _encode_histogram(data)
    elif isinstance(data, ExponentialHistogram):
        obj["exponentialHistogram"] = _encode_exponential_histogram(data)
    elif isinstance(data, Summary):
        obj["summary"] = _encode_summary(data)

    put_attributes(obj, metric.metadata, key="metadata")
    return obj


def _encode_gauge(gauge: Gauge) -> Record:
    obj: Record = {}
    if gauge.data_points:
        obj["dataPoints"] = [_encode_number_data_point(dp) for dp in gauge.data_points]
    return obj


def _encode_sum(sum_: Sum) -> Record:
    obj: Record = {}
    if sum_.data_points:
        obj["dataPoints"] = [_encode_number_data_point(dp) for dp in sum_.data_points]
    put_int(obj, "aggregationTemporality", sum_.aggregation_temporality)
    if sum_.is_monotonic:
        obj["isMonotonic"] = True
    return obj


def _encode_histogram(histogram: Histogram) -> Record:
    obj: Record = {}
    if histogram.data_points:
        obj["dataPoints"] = [_encode_histogram_data_point(dp) for dp in histogram.data_points]
    put_int(obj, "aggregationTemporality", histogram.aggregation_temporality)
    return obj


def _encode_exponential_histogram(histogram: ExponentialHistogram) -> Record:
    obj: Record = {}
    if histogram.data_points:
        obj["dataPoints"] = [
            _encode_exponential_histogram_data_point(dp) for dp in histogram.data_points
        ]
    put_int(obj, "aggregationTemporality", histogram.aggregation_temporality)
    return obj


def _encode_summary(summary: Summary) -> Record:
    obj: Record = {}
    if summary.data_points:
        obj["dataPoints"] = [_encode_summary_data_point(dp) for dp in summary.data_points]
    return obj


def _put_value(obj: Record, value: int | float | None) -> None:
    """Write the asDouble/asInt oneof. Unlike plain scalars, a set 0 is written."""
    if value is None:
        return
    if isinstance(value, int) and not isinstance(value, bool):
        obj["asInt"] = str(value)
    else:
        obj["asDouble"] = encode_double(value)


def _put_exemplars(obj: Record, exemplars: list[Exemplar]) -> None:
    if exemplars:
        obj["exemplars"] = [_encode_exemplar(exemplar) for exemplar in exemplars]


def _encode_number_data_point(dp: NumberDataPoint) -> Record:
    obj: Record = {}
    put_attributes(obj, dp.attributes)
    put_timestamp(obj, "startTimeUnixNano", dp.start_time_unix_nano)
    put_timestamp(obj, "timeUnixNano", dp.time_unix_nano)
    _put_value(obj, dp.value)
    _put_exemplars(obj, dp.exemplars)
    put_int(obj, "flags", dp.flags)
    return obj


def _encode_histogram_data_point(dp: HistogramDataPoint) -> Record:
    obj: Record = {}
    put_attributes(obj, dp.attributes)
    put_timestamp(obj, "startTimeUnixNano", dp.start_time_unix_nano)
    put_timestamp(obj, "timeUnixNano", dp.time_unix_nano)
    put_uint64(obj, "count", dp.count)
    put_double(obj, "sum", dp.sum, optional=True)
    if dp.bucket_counts:
        obj["bucketCounts"] = [str(count) for count in dp.bucket_counts]
    if dp.explicit_bounds:
        obj["explicitBounds"] = [encode_double(bound) for bound in dp.explicit_bounds]
    _put_exemplars(obj, dp.exemplars)
    put_int(obj, "flags", dp.flags)
    put_double(obj, "min", dp.min, optional=True)
    put_double(obj, "max", dp.max, optional=True)
    return obj


def _encode_buckets(buckets: Buckets) -> Record:
    obj: Record = {}
    put_int(obj, "offset", buckets.offset)
    if buckets.bucket_counts:
        obj["bucketCounts"] = [str(count) for count in buckets.bucket_counts]
    return obj


def _put_buckets(obj: Record, key: str, buckets: Buckets | None) -> None:
    """Buckets are omitted when they hold no counts (offset alone carries no data)."""
    if buckets is not None and buckets.bucket_counts:
        obj[key] = _encode_buckets(buckets)


def _encode_exponential_histogram_data_point(dp: ExponentialHistogramDataPoint) -> Record:
    obj: Record = {}
    put_attributes(obj, dp.attributes)
    put_timestamp(obj, "startTimeUnixNano", dp.start_time_unix_nano)
    put_timestamp(obj, "timeUnixNano", dp.time_unix_nano)
    put_uint64(obj, "count", dp.count)
    put_double(obj, "sum", dp.sum, optional=True)
    put_int(obj, "scale", dp.scale)
    put_uint64(obj, "zeroCount", dp.zero_count)
    _put_buckets(obj, "positive", dp.positive)
    _put_buckets(obj, "negative", dp.negative)
    put_int(obj, "flags", dp.flags)
    _put_exemplars(obj, dp.exemplars)
    put_double(obj, "min", dp.min, optional=True)
    put_double(obj, "max", dp.max, optional=True)
    put_double(obj, "zeroThreshold", dp.zero_threshold)
    return obj


def _encode_value_at_quantile(value: ValueAtQuantile) -> Record:
    obj: Record = {}
    put_double(obj, "quantile", value.quantile)
    put_double(obj, "value", value.value)
    return obj


def _encode_summary_data_point(dp: SummaryDataPoint) -> Record:
    obj: Record = {}
    put_attributes(obj, dp.attributes)
    put_timestamp(obj, "startTimeUnixNano", dp.start_time_unix_nano)
    put_timestamp(obj, "timeUnixNano", dp.time_unix_nano)
    put_uint64(obj, "count", dp.count)
    put_double(obj, "sum", dp.sum)
    if dp.quantile_values:
        obj["quantileValues"] = [_encode_value_at_quantile(q) for q in dp.quantile_values]
    put_int(obj, "flags", dp.flags)
    return obj


def _encode_exemplar(exemplar: Exemplar) -> Record:
    obj: Record = {}
    if exemplar.filtered_attributes:
        obj["filteredAttributes"] = [encode_key_value(kv) for kv in exemplar.filtered_attributes]
    put_timestamp(obj, "timeUnixNano", exemplar.time_unix_nano)
    _put_value(obj, exemplar.value)
    put_hex_id(obj, "spanId", exemplar.span_id)
    put_hex_id(obj, "traceId", exemplar.trace_id)
    return obj


def serialize_metrics_data(metrics_data: MetricsData, stream: BinaryIO) -> None:
    """Write ``metrics_data`` as one OTLP JSON line to ``stream``."""
    serialize_to_stream(
        stream,
        lambda out: write_otlp_data(out, metrics_data, METRICS_LAYOUT, encode_metric),
    )
