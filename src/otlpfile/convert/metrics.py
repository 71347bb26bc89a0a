"""
SDK metrics -> Metric conversion.

Supported SDK data shapes:

    Gauge                 -> gauge
    Sum                   -> sum (temporality, monotonic)
    Histogram             -> histogram (explicit bounds)
    ExponentialHistogram  -> exponentialHistogram (scale, offsets, bucket counts)

Any other shape converts to None and is skipped by the caller.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from typing import Any

from opentelemetry.sdk.metrics.export import (
    ExponentialHistogram as SdkExponentialHistogram,
    Gauge as SdkGauge,
    Histogram as SdkHistogram,
    Metric as SdkMetric,
    MetricsData as SdkMetricsData,
    Sum as SdkSum,
)

from ..models import (
    AggregationTemporality,
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
)
from .common import convert_resource, convert_scope, safe_str, span_id_bytes, to_attributes, trace_id_bytes

logger = logging.getLogger("otlpfile.convert")

__all__ = ["convert_metric", "convert_metrics_data"]


def _finite_or_none(value: float | None) -> float | None:
    """SDK min/max are +/-inf when not tracked; those are omitted."""
    if value is None or not math.isfinite(value):
        return None
    return float(value)


def _temporality(value: Any) -> AggregationTemporality:
    return AggregationTemporality(int(getattr(value, "value", value)))


def _convert_exemplars(exemplars: Iterable[Any] | None) -> list[Exemplar]:
    if not exemplars:
        return []
    return [
        Exemplar(
            filtered_attributes=to_attributes(exemplar.filtered_attributes),
            time_unix_nano=exemplar.time_unix_nano or 0,
            value=exemplar.value,
            span_id=span_id_bytes(exemplar.span_id),
            trace_id=trace_id_bytes(exemplar.trace_id),
        )
        for exemplar in exemplars
    ]


def _convert_number_point(point: Any) -> NumberDataPoint:
    return NumberDataPoint(
        attributes=to_attributes(point.attributes),
        start_time_unix_nano=point.start_time_unix_nano or 0,
        time_unix_nano=point.time_unix_nano or 0,
        value=point.value,
        exemplars=_convert_exemplars(point.exemplars),
    )


def _convert_histogram_point(point: Any) -> HistogramDataPoint:
    bounds = [float(bound) for bound in point.explicit_bounds if not math.isinf(bound)]
    return HistogramDataPoint(
        attributes=to_attributes(point.attributes),
        start_time_unix_nano=point.start_time_unix_nano or 0,
        time_unix_nano=point.time_unix_nano or 0,
        count=point.count,
        sum=point.sum,
        bucket_counts=list(point.bucket_counts),
        explicit_bounds=bounds,
        exemplars=_convert_exemplars(point.exemplars),
        min=_finite_or_none(point.min),
        max=_finite_or_none(point.max),
    )


def _convert_buckets(buckets: Any) -> Buckets | None:
    if buckets is None:
        return None
    return Buckets(offset=buckets.offset, bucket_counts=list(buckets.bucket_counts))


def _convert_exponential_point(point: Any) -> ExponentialHistogramDataPoint:
    return ExponentialHistogramDataPoint(
        attributes=to_attributes(point.attributes),
        start_time_unix_nano=point.start_time_unix_nano or 0,
        time_unix_nano=point.time_unix_nano or 0,
        count=point.count,
        sum=point.sum,
        scale=point.scale,
        zero_count=point.zero_count,
        positive=_convert_buckets(point.positive),
        negative=_convert_buckets(point.negative),
        flags=point.flags or 0,
        exemplars=_convert_exemplars(point.exemplars),
        min=_finite_or_none(point.min),
        max=_finite_or_none(point.max),
        # Not exposed by every SDK release
        zero_threshold=getattr(point, "zero_threshold", 0.0) or 0.0,
    )


def convert_metric(metric: SdkMetric) -> Metric | None:
    """
    Convert one SDK metric.

    Returns:
        The Metric, or None when its data shape is not supported
    """
    data = metric.data
    if isinstance(data, SdkGauge):
        converted = Gauge(data_points=[_convert_number_point(p) for p in data.data_points])
    elif isinstance(data, SdkSum):
        converted = Sum(
            data_points=[_convert_number_point(p) for p in data.data_points],
            aggregation_temporality=_temporality(data.aggregation_temporality),
            is_monotonic=bool(data.is_monotonic),
        )
    elif isinstance(data, SdkHistogram):
        converted = Histogram(
            data_points=[_convert_histogram_point(p) for p in data.data_points],
            aggregation_temporality=_temporality(data.aggregation_temporality),
        )
    elif isinstance(data, SdkExponentialHistogram):
        converted = ExponentialHistogram(
            data_points=[_convert_exponential_point(p) for p in data.data_points],
            aggregation_temporality=_temporality(data.aggregation_temporality),
        )
    else:
        logger.debug(f"Skipping metric {metric.name!r}: unsupported data type {type(data).__name__}")
        return None

    return Metric(
        name=safe_str(metric.name),
        description=safe_str(metric.description),
        unit=safe_str(metric.unit),
        data=converted,
    )


def convert_metrics_data(metrics_data: SdkMetricsData) -> MetricsData:
    """
    Convert a full collection, keeping the SDK's resource and scope blocks.

    Unsupported metrics are dropped; scope blocks left empty are dropped too.
    """
    resource_blocks: list[ResourceMetrics] = []
    for sdk_resource_metrics in metrics_data.resource_metrics:
        scope_blocks: list[ScopeMetrics] = []
        for sdk_scope_metrics in sdk_resource_metrics.scope_metrics:
            metrics = [
                converted
                for converted in map(convert_metric, sdk_scope_metrics.metrics)
                if converted is not None
            ]
            if not metrics:
                continue
            scope_blocks.append(
                ScopeMetrics(
                    scope=convert_scope(sdk_scope_metrics.scope),
                    metrics=metrics,
                    schema_url=sdk_scope_metrics.schema_url or "",
                )
            )
        if scope_blocks:
            resource_blocks.append(
                ResourceMetrics(
                    resource=convert_resource(sdk_resource_metrics.resource),
                    scope_metrics=scope_blocks,
                    schema_url=sdk_resource_metrics.schema_url or "",
                )
            )
    return MetricsData(resource_metrics=resource_blocks)
