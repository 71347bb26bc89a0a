"""
Common OTLP JSON Protobuf Encoding primitives.

These helpers implement the encoding rules shared by every signal:

    - bytes identifiers (trace/span ids)  -> lowercase hex, omitted when empty or all-zero
    - opaque bytesValue                   -> standard base64
    - int64 / uint64 / fixed64            -> decimal string
    - double                              -> JSON number ("NaN", "Infinity", "-Infinity" when non-finite)
    - enum, uint32, fixed32, sint32       -> JSON integer
    - zero scalars and empty repeated     -> omitted

Records are encoded into insertion-ordered dicts (field order follows the
protobuf field numbering) and each dict is serialized and written as soon as
it is built. The document framing around the records is written directly to
the stream, so memory use is bounded by the largest single record rather
than by the batch.

See https://opentelemetry.io/docs/specs/otlp/#json-protobuf-encoding
"""

from __future__ import annotations

import base64
import logging
import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, BinaryIO, Generic, TypeVar

from .._compat import JSONEncodeError, json_dumps_bytes
from ..models import AnyValue, AnyValueKind, InstrumentationScope, KeyValue, Resource

__all__ = [
    "DocumentLayout",
    "write_otlp_data",
    "serialize_to_stream",
    "hex_id",
    "encode_double",
    "encode_any_value",
    "encode_key_value",
    "encode_resource",
    "encode_scope",
    "put_hex_id",
    "put_timestamp",
    "put_attributes",
    "put_uint64",
    "put_double",
    "put_string",
    "put_int",
]

D = TypeVar('D')
R = TypeVar('R')
S = TypeVar('S')
T = TypeVar('T')

Record = dict[str, Any]

_NEWLINE = b"\n"

logger = logging.getLogger("otlpfile.serializer")


# =============================================================================
# SCALAR PRIMITIVES
# =============================================================================

def hex_id(value: bytes) -> str | None:
    """Lowercase hex for an identifier, or None when it is empty or all-zero."""
    if not value or not any(value):
        return None
    return value.hex()


def encode_double(value: float) -> float | str:
    """JSON representation of a double; non-finite values use the proto3 string forms."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    return float(value)


def put_hex_id(obj: Record, key: str, value: bytes) -> None:
    encoded = hex_id(value)
    if encoded is not None:
        obj[key] = encoded


def put_timestamp(obj: Record, key: str, value: int) -> None:
    """fixed64 nanosecond timestamp -> decimal string, omitted when 0."""
    if value:
        obj[key] = str(value)


def put_uint64(obj: Record, key: str, value: int) -> None:
    if value:
        obj[key] = str(value)


def put_int(obj: Record, key: str, value: int) -> None:
    """Enum or 32-bit integer -> JSON integer, omitted when 0."""
    if value:
        obj[key] = int(value)


def put_double(obj: Record, key: str, value: float | None, optional: bool = False) -> None:
    """
    Write a double field.

    Plain doubles are omitted when 0. Optional doubles (proto3 ``optional``,
    e.g. histogram sum/min/max) are written whenever they are not None.
    """
    if value is None:
        return
    if optional or value != 0:
        obj[key] = encode_double(value)


def put_string(obj: Record, key: str, value: str | None) -> None:
    if value:
        obj[key] = value


def put_attributes(
    obj: Record,
    attributes: Sequence[KeyValue],
    dropped_count: int = 0,
    key: str = "attributes",
) -> None:
    """Write an attributes array and its dropped count, each only when non-empty."""
    if attributes:
        obj[key] = [encode_key_value(kv) for kv in attributes]
    if dropped_count:
        obj["droppedAttributesCount"] = int(dropped_count)


# =============================================================================
# STRUCTURED VALUES
# =============================================================================

def encode_any_value(value: AnyValue) -> Record:
    """Encode an AnyValue (recursively for arrays and kvlists)."""
    kind = value.kind
    if kind is AnyValueKind.STRING:
        return {"stringValue": value.value}
    if kind is AnyValueKind.BOOL:
        return {"boolValue": bool(value.value)}
    if kind is AnyValueKind.INT:
        # int64 -> string per protobuf JSON mapping
        return {"intValue": str(value.value)}
    if kind is AnyValueKind.DOUBLE:
        return {"doubleValue": encode_double(value.value)}
    if kind is AnyValueKind.ARRAY:
        array: Record = {}
        if value.value:
            array["values"] = [encode_any_value(item) for item in value.value]
        return {"arrayValue": array}
    if kind is AnyValueKind.KVLIST:
        kvlist: Record = {}
        if value.value:
            kvlist["values"] = [encode_key_value(kv) for kv in value.value]
        return {"kvlistValue": kvlist}
    if kind is AnyValueKind.BYTES:
        # General bytes fields use base64, unlike identifiers
        return {"bytesValue": base64.b64encode(bytes(value.value)).decode("ascii")}
    return {}


def encode_key_value(kv: KeyValue) -> Record:
    obj: Record = {"key": kv.key}
    if kv.value is not None:
        obj["value"] = encode_any_value(kv.value)
    return obj


def encode_resource(resource: Resource) -> Record:
    obj: Record = {}
    put_attributes(obj, resource.attributes, resource.dropped_attributes_count)
    return obj


def encode_scope(scope: InstrumentationScope) -> Record:
    obj: Record = {}
    put_string(obj, "name", scope.name)
    put_string(obj, "version", scope.version)
    put_attributes(obj, scope.attributes, scope.dropped_attributes_count)
    return obj


# =============================================================================
# GENERIC RESOURCE -> SCOPE -> RECORD TRAVERSAL
# =============================================================================

@dataclass(frozen=True, slots=True)
class DocumentLayout(Generic[D, R, S, T]):
    """
    Describes one signal's document shape for write_otlp_data().

    Attributes:
        resource_blocks_key: JSON key of the resource block array ("resourceSpans")
        scope_blocks_key: JSON key of the scope block array ("scopeSpans")
        records_key: JSON key of the record array ("spans")
        resource_blocks: data -> resource blocks
        unpack_resource_block: block -> (resource, scope blocks, schema url)
        unpack_scope_block: block -> (scope, records, schema url)
    """
    resource_blocks_key: str
    scope_blocks_key: str
    records_key: str
    resource_blocks: Callable[[D], Sequence[R]]
    unpack_resource_block: Callable[[R], tuple[Resource | None, Sequence[S], str]]
    unpack_scope_block: Callable[[S], tuple[InstrumentationScope | None, Sequence[T], str]]


def _key(name: str) -> bytes:
    return json_dumps_bytes(name) + b":"


def _encode(name: str, value: Any) -> bytes | None:
    """Serialize one member value, or None (with a warning) when it cannot be encoded."""
    try:
        return json_dumps_bytes(value)
    except JSONEncodeError as e:
        logger.warning(f"Dropping unencodable {name!r} value: {e}")
        return None


class _ObjectWriter:
    """
    Writes one JSON object's members directly to a stream, tracking commas.

    Values are fully encoded before any of their framing is written, so an
    unencodable value is skipped without leaving a partial member behind.
    """

    __slots__ = ('_write', '_first')

    def __init__(self, write: Callable[[bytes], Any]) -> None:
        self._write = write
        self._first = True

    def __enter__(self) -> _ObjectWriter:
        self._write(b"{")
        return self

    def __exit__(self, *exc_info: Any) -> None:
        # Only close the object on success; a failed write propagates as-is
        if exc_info[0] is None:
            self._write(b"}")

    def member(self, name: str) -> None:
        self._write(_key(name) if self._first else b"," + _key(name))
        self._first = False

    def value(self, name: str, value: Any) -> None:
        encoded = _encode(name, value)
        if encoded is not None:
            self.member(name)
            self._write(encoded)

    def array(self, name: str, items: Sequence[Any], write_item: Callable[[Any], None]) -> None:
        self.member(name)
        self._write(b"[")
        for i, item in enumerate(items):
            if i:
                self._write(b",")
            write_item(item)
        self._write(b"]")

    def encoded_array(self, name: str, items: Sequence[Any], encode_item: Callable[[Any], Any]) -> None:
        """Write an array of independently encoded items; the member is omitted if none encode."""
        opened = False
        for item in items:
            encoded = _encode(name, encode_item(item))
            if encoded is None:
                continue
            if opened:
                self._write(b"," + encoded)
            else:
                self.member(name)
                self._write(b"[" + encoded)
                opened = True
        if opened:
            self._write(b"]")


def write_otlp_data(
    stream: BinaryIO,
    data: D,
    layout: DocumentLayout[D, R, S, T],
    encode_record: Callable[[T], Record],
) -> None:
    """
    Write one top-level OTLP document to ``stream``.

    Shape (keys come from ``layout``):
        {"resourceSpans":[{"resource":{...},"scopeSpans":[{"scope":{...},
          "spans":[...],"schemaUrl":"..."}],"schemaUrl":"..."}]}

    Each record is encoded by ``encode_record`` and serialized to bytes
    before its separator is written; this is the only signal-specific part
    of the traversal. A record that cannot be serialized is dropped with a
    warning and the rest of the document is still written.
    """
    write = stream.write

    def write_scope_block(block: S) -> None:
        scope, records, schema_url = layout.unpack_scope_block(block)
        with _ObjectWriter(write) as obj:
            if scope is not None:
                obj.value("scope", encode_scope(scope))
            if records:
                obj.encoded_array(layout.records_key, records, encode_record)
            if schema_url:
                obj.value("schemaUrl", schema_url)

    def write_resource_block(block: R) -> None:
        resource, scope_blocks, schema_url = layout.unpack_resource_block(block)
        with _ObjectWriter(write) as obj:
            if resource is not None:
                obj.value("resource", encode_resource(resource))
            if scope_blocks:
                obj.array(layout.scope_blocks_key, scope_blocks, write_scope_block)
            if schema_url:
                obj.value("schemaUrl", schema_url)

    resource_blocks = layout.resource_blocks(data)
    with _ObjectWriter(write) as root:
        if resource_blocks:
            root.array(layout.resource_blocks_key, resource_blocks, write_resource_block)


def serialize_to_stream(stream: BinaryIO, write_document: Callable[[BinaryIO], None]) -> None:
    """
    Write one document followed by a newline, then flush.

    If the stream raises, the error propagates and no newline is written,
    so a failed export never produces a terminated (apparently complete) line.
    """
    write_document(stream)
    stream.write(_NEWLINE)
    stream.flush()
