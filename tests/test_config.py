"""
Unit tests for exporter configuration.
"""

import logging
import unittest
from unittest.mock import patch

from otlpfile import ConfigurationError, configure, get_config, reset_config
from otlpfile.config import ExporterConfig


class TestExporterConfig(unittest.TestCase):
    """Tests for ExporterConfig."""

    def test_default_values(self) -> None:
        """Test default configuration values."""
        config = ExporterConfig()
        self.assertIsNone(config.output_path)
        self.assertTrue(config.append)
        self.assertFalse(config.batch)
        self.assertEqual(config.metrics_temporality, "cumulative")
        self.assertEqual(config.metric_export_interval_ms, 60000)
        self.assertEqual(config.log_level, "WARNING")
        self.assertTrue(config.writes_to_console)

    def test_console_paths(self) -> None:
        for path in (None, "", "-", "stdout", "STDOUT"):
            self.assertTrue(ExporterConfig(output_path=path).writes_to_console, path)
        self.assertFalse(ExporterConfig(output_path="out.jsonl").writes_to_console)

    @patch.dict("os.environ", {
        "OTLP_FILE_PATH": "/tmp/otel/telemetry.jsonl",
        "OTLP_FILE_APPEND": "false",
        "OTLP_FILE_BATCH": "yes",
        "OTLP_FILE_METRICS_TEMPORALITY": "DELTA",
        "OTLP_FILE_METRIC_EXPORT_INTERVAL_MS": "5000",
        "OTLP_FILE_LOG_LEVEL": "debug",
    })
    def test_from_env(self) -> None:
        """Test loading from environment variables."""
        config = ExporterConfig.from_env()
        self.assertEqual(config.output_path, "/tmp/otel/telemetry.jsonl")
        self.assertFalse(config.append)
        self.assertTrue(config.batch)
        self.assertEqual(config.metrics_temporality, "delta")
        self.assertEqual(config.metric_export_interval_ms, 5000)
        self.assertEqual(config.log_level, "DEBUG")

    @patch.dict("os.environ", {"OTLP_FILE_METRIC_EXPORT_INTERVAL_MS": "soon"})
    def test_invalid_int_env_uses_default(self) -> None:
        self.assertEqual(ExporterConfig.from_env().metric_export_interval_ms, 60000)

    def test_validate(self) -> None:
        ExporterConfig().validate()
        with self.assertRaises(ConfigurationError):
            ExporterConfig(metrics_temporality="sometimes").validate()
        with self.assertRaises(ConfigurationError):
            ExporterConfig(metric_export_interval_ms=0).validate()
        with self.assertRaises(ValueError):
            ExporterConfig(log_level="LOUD").validate()

    def test_to_dict(self) -> None:
        data = ExporterConfig(output_path="x.jsonl").to_dict()
        self.assertEqual(data["output_path"], "x.jsonl")
        self.assertEqual(data["metrics_temporality"], "cumulative")


class TestConfigure(unittest.TestCase):
    """Tests for the module-level configuration functions."""

    def setUp(self) -> None:
        reset_config()
        self._level = logging.getLogger("otlpfile").level

    def tearDown(self) -> None:
        reset_config()
        logging.getLogger("otlpfile").setLevel(self._level)

    @patch.dict("os.environ", {"OTLP_FILE_PATH": "env.jsonl"}, clear=True)
    def test_get_config_reads_env_once(self) -> None:
        self.assertEqual(get_config().output_path, "env.jsonl")
        self.assertIs(get_config(), get_config())

    @patch.dict("os.environ", {}, clear=True)
    def test_configure_overrides(self) -> None:
        config = configure(output_path="override.jsonl", metrics_temporality="Delta", log_level="info")
        self.assertIs(config, get_config())
        self.assertEqual(config.output_path, "override.jsonl")
        self.assertEqual(config.metrics_temporality, "delta")
        self.assertEqual(logging.getLogger("otlpfile").level, logging.INFO)

    @patch.dict("os.environ", {}, clear=True)
    def test_configure_rejects_invalid(self) -> None:
        with self.assertRaises(ConfigurationError):
            configure(metrics_temporality="hourly")


if __name__ == "__main__":
    unittest.main()
