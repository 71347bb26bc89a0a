"""
Compatibility layer for optional dependencies and SDK renames.

This module provides graceful fallbacks when optional dependencies are missing.
All internal otlpfile modules should import from here rather than directly
importing optional packages.
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "json_dumps_bytes",
    "JSONEncodeError",
    "JSON_ENCODER",
    "LogRecordExporter",
    "LogRecordExportResult",
]

# =============================================================================
# JSON Serialization
# =============================================================================

try:
    import orjson

    def json_dumps_bytes(obj: Any) -> bytes:
        """Serialize to JSON bytes (fast path with orjson)."""
        return orjson.dumps(obj)

    JSONEncodeError = orjson.JSONEncodeError
    JSON_ENCODER = "orjson"

except ImportError:
    import json

    def json_dumps_bytes(obj: Any) -> bytes:
        """Serialize to JSON bytes (stdlib fallback)."""
        return json.dumps(obj, separators=(',', ':'), ensure_ascii=False).encode('utf-8')

    # stdlib json raises TypeError for unsupported types; encoding to UTF-8
    # raises UnicodeEncodeError (a ValueError) for lone surrogates
    JSONEncodeError = (TypeError, ValueError)  # type: ignore[assignment]
    JSON_ENCODER = "json"

# =============================================================================
# Log exporter interface
# =============================================================================

try:
    # Current SDK names; the LogExporter aliases emit a DeprecationWarning
    from opentelemetry.sdk._logs.export import LogRecordExporter, LogRecordExportResult
except ImportError:
    from opentelemetry.sdk._logs.export import (  # type: ignore[assignment]
        LogExporter as LogRecordExporter,
        LogExportResult as LogRecordExportResult,
    )
