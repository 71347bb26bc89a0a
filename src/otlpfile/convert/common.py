"""
Conversion helpers shared by the span, log and metric converters.

Attribute values from the SDK are mapped onto the OTLP AnyValue variants:

    bool                          -> boolValue
    int (within int64)            -> intValue
    int (outside int64)           -> stringValue (decimal, never truncated)
    float                         -> doubleValue
    str                           -> stringValue
    bytes / bytearray / memoryview -> bytesValue
    list / tuple                  -> arrayValue (recursive)
    Mapping                       -> kvlistValue (recursive)
    None                          -> stringValue ""
    anything else                 -> stringValue str(value)

Text is passed through safe_str(), so lone surrogates (e.g. from
``os.fsdecode`` or ``surrogateescape`` decoding) become backslash escapes
instead of producing a string that cannot be written as UTF-8.

None of these functions raise for unexpected input.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..models import AnyValue, InstrumentationScope, KeyValue, Resource

__all__ = [
    "safe_str",
    "to_any_value",
    "to_key_value",
    "to_attributes",
    "trace_id_bytes",
    "span_id_bytes",
    "convert_resource",
    "convert_scope",
]

_INT64_MIN = -(2 ** 63)
_INT64_MAX = 2 ** 63 - 1


def safe_str(value: Any) -> str:
    """str(value) that is always valid UTF-8; None becomes ""."""
    if value is None:
        return ""
    text = value if isinstance(value, str) else str(value)
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        return text.encode("utf-8", "backslashreplace").decode("utf-8")
    return text


def to_any_value(value: Any) -> AnyValue:
    """Map an arbitrary attribute or body value onto an AnyValue."""
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return AnyValue.of_bool(value)
    if isinstance(value, int):
        if _INT64_MIN <= value <= _INT64_MAX:
            return AnyValue.of_int(value)
        return AnyValue.of_string(str(value))
    if isinstance(value, float):
        return AnyValue.of_double(value)
    if isinstance(value, str):
        return AnyValue.of_string(safe_str(value))
    if value is None:
        return AnyValue.of_string("")
    if isinstance(value, (bytes, bytearray, memoryview)):
        return AnyValue.of_bytes(bytes(value))
    if isinstance(value, (list, tuple)):
        return AnyValue.of_array([to_any_value(item) for item in value])
    if isinstance(value, Mapping):
        return AnyValue.of_kvlist([to_key_value(k, v) for k, v in value.items()])
    return AnyValue.of_string(safe_str(value))
def to_key_value(key: Any, value: Any) -> KeyValue:
    return KeyValue(key=safe_str(key), value=to_any_value(value))


def to_attributes(attributes: Mapping[str, Any] | None) -> list[KeyValue]:
    """Attribute mapping -> KeyValue list, in the mapping's iteration order."""
    if not attributes:
        return []
    return [to_key_value(key, value) for key, value in attributes.items()]


def trace_id_bytes(trace_id: int | None) -> bytes:
    """SDK integer trace id -> 16 big-endian bytes (b"" when unset)."""
    if not trace_id:
        return b""
    return trace_id.to_bytes(16, "big")


def span_id_bytes(span_id: int | None) -> bytes:
    """SDK integer span id -> 8 big-endian bytes (b"" when unset)."""
    if not span_id:
        return b""
    return span_id.to_bytes(8, "big")


def convert_resource(resource: Any) -> Resource | None:
    """SDK Resource -> Resource model; None passes through."""
    if resource is None:
        return None
    return Resource(attributes=to_attributes(resource.attributes))


def convert_scope(scope: Any) -> InstrumentationScope:
    """SDK InstrumentationScope (or None) -> InstrumentationScope model."""
    if scope is None:
        return InstrumentationScope()
    return InstrumentationScope(
        name=safe_str(scope.name),
        version=safe_str(scope.version),
        attributes=to_attributes(scope.attributes),
    )
