"""
test_metrics.py
~~~~~~~~~~~~~~~

Unit tests for metric conversion and the metric exporter.

Metrics are produced by a real MeterProvider and collected with an
InMemoryMetricReader, then exported through OtlpFileMetricExporter.

Tests:
    1. Counter -> monotonic cumulative sum with asInt points
    2. Histogram -> count, sum, bucket counts, bounds, min/max
    3. Observable gauge -> asDouble point
    4. Exponential histogram buckets
    5. Unsupported shapes are skipped
    6. Summary serialization
    7. Preferred temporality and reader wiring
"""

from __future__ import annotations

import io
import json
import math
import unittest
from types import SimpleNamespace

from opentelemetry.metrics import Observation
from opentelemetry.sdk.metrics import Counter, MeterProvider, UpDownCounter
from opentelemetry.sdk.metrics.export import (
    AggregationTemporality,
    InMemoryMetricReader,
    MetricExportResult,
    PeriodicExportingMetricReader,
)
from opentelemetry.sdk.metrics.view import ExponentialBucketHistogramAggregation, View
from opentelemetry.sdk.resources import Resource

from otlpfile import BufferOutput, OtlpFileMetricExporter, create_otlp_file_metric_reader
from otlpfile.config import ExporterConfig
from otlpfile.convert import convert_metric
from otlpfile.models import (
    Buckets,
    ExponentialHistogram,
    ExponentialHistogramDataPoint,
    Metric,
    MetricsData,
    ResourceMetrics,
    ScopeMetrics,
    Summary,
    SummaryDataPoint,
    ValueAtQuantile,
)
from otlpfile.serializer import serialize_metrics_data


class MetricsTestCase(unittest.TestCase):
    """Collects from a fresh MeterProvider and exports to a BufferOutput."""

    views: list = []

    def setUp(self) -> None:
        self.reader = InMemoryMetricReader()
        self.provider = MeterProvider(
            resource=Resource({"service.name": "metric-service"}),
            metric_readers=[self.reader],
            views=self.views,
        )
        self.meter = self.provider.get_meter("test.meter", "1.0.0")
        self.output = BufferOutput()
        self.exporter = OtlpFileMetricExporter(output=self.output, config=ExporterConfig())

    def tearDown(self) -> None:
        self.provider.shutdown()

    def export_metrics(self) -> list[dict]:
        """Export one collection and return its metrics."""
        result = self.exporter.export(self.reader.get_metrics_data())
        self.assertEqual(result, MetricExportResult.SUCCESS)
        lines = self.output.lines()
        self.assertEqual(len(lines), 1)

        resource_metrics = json.loads(lines[0])["resourceMetrics"][0]
        self.assertEqual(
            resource_metrics["resource"]["attributes"][0],
            {"key": "service.name", "value": {"stringValue": "metric-service"}},
        )
        scope_metrics = resource_metrics["scopeMetrics"][0]
        self.assertEqual(scope_metrics["scope"], {"name": "test.meter", "version": "1.0.0"})
        return scope_metrics["metrics"]

    def get_metric(self, name: str) -> dict:
        metrics = {metric["name"]: metric for metric in self.export_metrics()}
        self.assertIn(name, metrics)
        return metrics[name]


class TestSumAndGauge(MetricsTestCase):
    """Test counters and gauges."""

    def test_counter(self) -> None:
        """Monotonic cumulative sum with int points as strings."""
        counter = self.meter.create_counter("requests", unit="1", description="Handled requests")
        counter.add(5, {"route": "/a"})
        counter.add(7, {"route": "/b"})

        metric = self.get_metric("requests")
        self.assertEqual(metric["description"], "Handled requests")
        self.assertEqual(metric["unit"], "1")
        self.assertEqual(list(metric), ["name", "description", "unit", "sum"])

        sum_ = metric["sum"]
        self.assertEqual(sum_["aggregationTemporality"], 2)
        self.assertTrue(sum_["isMonotonic"])
        self.assertEqual(sorted(dp["asInt"] for dp in sum_["dataPoints"]), ["5", "7"])

        point = sum_["dataPoints"][0]
        self.assertIsInstance(point["timeUnixNano"], str)
        self.assertEqual(point["attributes"][0]["key"], "route")
        self.assertNotIn("asDouble", point)

    def test_up_down_counter_not_monotonic(self) -> None:
        counter = self.meter.create_up_down_counter("queue.depth")
        counter.add(3)
        counter.add(-1)

        sum_ = self.get_metric("queue.depth")["sum"]
        self.assertNotIn("isMonotonic", sum_)
        self.assertEqual(sum_["dataPoints"][0]["asInt"], "2")

    def test_observable_gauge(self) -> None:
        self.meter.create_observable_gauge(
            "temperature",
            callbacks=[lambda options: [Observation(42.5, {"room": "lab"})]],
            unit="Cel",
        )

        gauge = self.get_metric("temperature")["gauge"]
        self.assertEqual(len(gauge["dataPoints"]), 1)
        self.assertEqual(gauge["dataPoints"][0]["asDouble"], 42.5)
        self.assertNotIn("aggregationTemporality", gauge)


class TestHistogram(MetricsTestCase):
    """Test explicit-bucket histograms."""

    def test_histogram(self) -> None:
        histogram = self.meter.create_histogram("latency", unit="ms")
        for value in (10.5, 20.3, 15.7):
            histogram.record(value)

        data = self.get_metric("latency")["histogram"]
        self.assertEqual(data["aggregationTemporality"], 2)
        point = data["dataPoints"][0]
        self.assertEqual(point["count"], "3")
        self.assertAlmostEqual(point["sum"], 46.5, places=6)
        self.assertEqual(sum(int(count) for count in point["bucketCounts"]), 3)
        self.assertEqual(len(point["bucketCounts"]), len(point["explicitBounds"]) + 1)
        self.assertTrue(all(isinstance(count, str) for count in point["bucketCounts"]))
        self.assertTrue(all(math.isfinite(bound) for bound in point["explicitBounds"]))
        self.assertEqual(point["min"], 10.5)
        self.assertEqual(point["max"], 20.3)


class TestExponentialHistogram(MetricsTestCase):
    """Test exponential histograms selected through a View."""

    views = [View(instrument_name="payload.size", aggregation=ExponentialBucketHistogramAggregation())]

    def test_exponential_histogram(self) -> None:
        histogram = self.meter.create_histogram("payload.size", unit="By")
        for value in (1.0, 2.0, 4.0):
            histogram.record(value)

        data = self.get_metric("payload.size")["exponentialHistogram"]
        point = data["dataPoints"][0]
        self.assertEqual(point["count"], "3")
        self.assertAlmostEqual(point["sum"], 7.0)
        self.assertIn("scale", point)
        self.assertEqual(sum(int(count) for count in point["positive"]["bucketCounts"]), 3)
        self.assertEqual(point["min"], 1.0)
        self.assertEqual(point["max"], 4.0)
        self.assertNotIn("zeroCount", point)

    def test_empty_buckets_omitted(self) -> None:
        """Bucket sets with no counts are left out, even with an offset."""
        data = MetricsData(resource_metrics=[
            ResourceMetrics(scope_metrics=[
                ScopeMetrics(metrics=[
                    Metric(
                        name="latency",
                        data=ExponentialHistogram(data_points=[
                            ExponentialHistogramDataPoint(
                                count=2,
                                zero_count=2,
                                positive=Buckets(offset=3, bucket_counts=[]),
                                negative=Buckets(),
                            )
                        ]),
                    )
                ])
            ])
        ])
        stream = io.BytesIO()
        serialize_metrics_data(data, stream)

        metric = json.loads(stream.getvalue())["resourceMetrics"][0]["scopeMetrics"][0]["metrics"][0]
        point = metric["exponentialHistogram"]["dataPoints"][0]
        self.assertNotIn("positive", point)
        self.assertNotIn("negative", point)
        self.assertEqual(point["zeroCount"], "2")


class TestUnsupportedAndSummary(unittest.TestCase):
    """Test shapes the SDK does not produce."""

    def test_unknown_data_type_skipped(self) -> None:
        metric = SimpleNamespace(name="mystery", description="", unit="", data=object())
        with self.assertLogs("otlpfile.convert", level="DEBUG") as captured:
            self.assertIsNone(convert_metric(metric))
        self.assertIn("mystery", captured.output[0])

    def test_summary_serialization(self) -> None:
        data = MetricsData(resource_metrics=[
            ResourceMetrics(scope_metrics=[
                ScopeMetrics(metrics=[
                    Metric(
                        name="rpc.duration",
                        data=Summary(data_points=[
                            SummaryDataPoint(
                                time_unix_nano=10,
                                count=4,
                                sum=12.5,
                                quantile_values=[
                                    ValueAtQuantile(quantile=0.0, value=1.0),
                                    ValueAtQuantile(quantile=1.0, value=6.0),
                                ],
                            )
                        ]),
                    )
                ])
            ])
        ])
        stream = io.BytesIO()
        serialize_metrics_data(data, stream)

        metric = json.loads(stream.getvalue())["resourceMetrics"][0]["scopeMetrics"][0]["metrics"][0]
        self.assertEqual(metric, {
            "name": "rpc.duration",
            "summary": {"dataPoints": [{
                "timeUnixNano": "10",
                "count": "4",
                "sum": 12.5,
                "quantileValues": [{"value": 1.0}, {"quantile": 1.0, "value": 6.0}],
            }]},
        })


class TestMetricExporterConfiguration(unittest.TestCase):
    """Test temporality preference and reader wiring."""

    def test_cumulative_by_default(self) -> None:
        exporter = OtlpFileMetricExporter(output=BufferOutput(), config=ExporterConfig())
        self.assertEqual(exporter._preferred_temporality[Counter], AggregationTemporality.CUMULATIVE)

    def test_delta_preference(self) -> None:
        exporter = OtlpFileMetricExporter(
            output=BufferOutput(),
            config=ExporterConfig(metrics_temporality="delta"),
        )
        self.assertEqual(exporter._preferred_temporality[Counter], AggregationTemporality.DELTA)
        self.assertEqual(exporter._preferred_temporality[UpDownCounter], AggregationTemporality.CUMULATIVE)

    def test_delta_counter_export(self) -> None:
        reader = InMemoryMetricReader(preferred_temporality={Counter: AggregationTemporality.DELTA})
        provider = MeterProvider(metric_readers=[reader])
        provider.get_meter("delta").create_counter("hits").add(1)

        output = BufferOutput()
        OtlpFileMetricExporter(output=output, config=ExporterConfig()).export(reader.get_metrics_data())
        provider.shutdown()

        metric = json.loads(output.lines()[0])["resourceMetrics"][0]["scopeMetrics"][0]["metrics"][0]
        self.assertEqual(metric["sum"]["aggregationTemporality"], 1)

    def test_metric_reader(self) -> None:
        output = BufferOutput()
        reader = create_otlp_file_metric_reader(
            output=output,
            config=ExporterConfig(metric_export_interval_ms=3_600_000),
        )
        self.assertIsInstance(reader, PeriodicExportingMetricReader)

        provider = MeterProvider(metric_readers=[reader])
        provider.get_meter("reader.test").create_counter("ticks").add(2)
        provider.force_flush()
        provider.shutdown()

        documents = [json.loads(line) for line in output.lines()]
        self.assertGreaterEqual(len(documents), 1)
        metric = documents[0]["resourceMetrics"][0]["scopeMetrics"][0]["metrics"][0]
        self.assertEqual(metric["name"], "ticks")
        self.assertEqual(metric["sum"]["dataPoints"][0]["asInt"], "2")


if __name__ == "__main__":
    unittest.main()
