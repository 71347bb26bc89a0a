"""
Output sinks for otlpfile.

A sink is an append-only byte destination plus a lock ("sync root"). Every
exporter holds the sink's sync root for the full duration of one document
write, including the trailing newline and flush, so that traces, logs and
metrics exported concurrently from different processor threads never
interleave partial lines.

Sinks:
    - ConsoleOutput: standard output
    - FileOutput: a file, opened lazily in binary append (or truncate) mode
    - BufferOutput: an in-memory buffer, useful for tests and embedding

Sharing:
    get_output() returns one shared sink per destination, so that exporters
    configured for the same file (or for stdout) also share the same lock.
"""

from __future__ import annotations

import io
import logging
import os
import sys
import threading
from abc import ABC, abstractmethod
from typing import BinaryIO

from .config import ExporterConfig
from .exceptions import SinkClosedError

logger = logging.getLogger("otlpfile.output")

__all__ = [
    "OutputSink",
    "ConsoleOutput",
    "FileOutput",
    "BufferOutput",
    "get_output",
    "output_from_config",
]


class OutputSink(ABC):
    """
    Append-only byte destination with a mutual-exclusion primitive.

    Thread Safety:
        The sink does not lock on its own. Callers acquire ``sync_root``
        around a complete write (document, newline, flush).
    """

    def __init__(self) -> None:
        self._sync_root = threading.RLock()

    @property
    def sync_root(self) -> threading.RLock:
        """Lock guarding one complete document write."""
        return self._sync_root

    @property
    @abstractmethod
    def stream(self) -> BinaryIO:
        """Writable binary stream for the current write."""

    def close(self) -> None:
        """Release the underlying stream, if the sink owns one."""


class _TextStreamAdapter(io.RawIOBase):
    """Binary view over a text stream that has no ``buffer`` (e.g. io.StringIO)."""

    def __init__(self, text_stream) -> None:
        super().__init__()
        self._text_stream = text_stream

    def writable(self) -> bool:
        return True

    def write(self, data) -> int:
        self._text_stream.write(bytes(data).decode("utf-8"))
        return len(data)

    def flush(self) -> None:
        self._text_stream.flush()


class ConsoleOutput(OutputSink):
    """Writes to the process's standard output."""

    def __repr__(self) -> str:
        return "<ConsoleOutput stdout>"

    @property
    def stream(self) -> BinaryIO:
        # Resolved per write so that redirected sys.stdout is honoured
        buffer = getattr(sys.stdout, "buffer", None)
        if buffer is not None:
            return buffer
        return _TextStreamAdapter(sys.stdout)


class FileOutput(OutputSink):
    """
    Writes to a file on disk.

    The file is opened on first use; parent directories are created as
    needed. With ``append=False`` an existing file is truncated when it is
    opened.
    """

    def __init__(self, path: str | os.PathLike[str], append: bool = True) -> None:
        super().__init__()
        self._path = os.fspath(path)
        self._append = append
        self._file: BinaryIO | None = None
        self._closed = False

    def __repr__(self) -> str:
        return f"<FileOutput path={self._path!r} append={self._append}>"

    @property
    def path(self) -> str:
        return self._path

    @property
    def stream(self) -> BinaryIO:
        with self._sync_root:
            if self._closed:
                raise SinkClosedError(f"Output file {self._path!r} is closed")
            if self._file is None:
                directory = os.path.dirname(self._path)
                if directory:
                    os.makedirs(directory, exist_ok=True)
                self._file = open(self._path, "ab" if self._append else "wb")
                logger.debug(f"Opened output file {self._path!r}")
            return self._file

    def close(self) -> None:
        with self._sync_root:
            self._closed = True
            if self._file is not None:
                self._file.close()
                self._file = None


class BufferOutput(OutputSink):
    """In-memory sink. ``lines()`` returns each written line without its terminator."""

    def __init__(self) -> None:
        super().__init__()
        self._buffer = io.BytesIO()

    def __repr__(self) -> str:
        return f"<BufferOutput size={len(self._buffer.getbuffer())}>"

    @property
    def stream(self) -> BinaryIO:
        return self._buffer

    def getvalue(self) -> bytes:
        with self._sync_root:
            return self._buffer.getvalue()

    def lines(self) -> list[str]:
        return [line for line in self.getvalue().decode("utf-8").split("\n") if line]


# Shared sinks, keyed by destination
_outputs: dict[str, OutputSink] = {}
_outputs_lock = threading.Lock()
_CONSOLE_KEY = "<stdout>"


def get_output(path: str | os.PathLike[str] | None = None, append: bool = True) -> OutputSink:
    """
    Return the shared sink for a destination.

    Args:
        path: File path, or None for standard output
        append: Append mode, only used when the file sink is first created

    Returns:
        The process-wide sink for that destination
    """
    key = _CONSOLE_KEY if path is None else os.path.abspath(os.fspath(path))
    with _outputs_lock:
        sink = _outputs.get(key)
        if sink is None:
            sink = ConsoleOutput() if path is None else FileOutput(key, append=append)
            _outputs[key] = sink
        return sink


def output_from_config(config: ExporterConfig) -> OutputSink:
    """Return the shared sink for a configuration's destination."""
    if config.writes_to_console:
        return get_output(None)
    return get_output(config.output_path, append=config.append)


def _reset_outputs() -> None:
    """Close and forget shared sinks. For testing."""
    with _outputs_lock:
        for sink in _outputs.values():
            sink.close()
        _outputs.clear()
