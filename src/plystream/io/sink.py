"""Output sinks: append target with a separately addressable header region.

A sink distinguishes two writes: ``write_header`` always lands at offset 0,
``write`` always appends after the current end. The first header write fixes
the header length and every later header must have exactly that length, so
overwriting the placeholder can never spill into the body.
"""

from __future__ import annotations

import io
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import BinaryIO, Callable, Optional

from plystream.core.errors import SinkError

logger = logging.getLogger(__name__)


class OutputSink(ABC):
    """Byte-addressable append target with a fixed-offset header write."""

    def __init__(self) -> None:
        self.header_length: Optional[int] = None
        self.closed = False

    def write_header(self, data: bytes) -> None:
        self._check_open()
        if self.header_length is None:
            self.header_length = len(data)
        elif len(data) != self.header_length:
            raise SinkError(
                f"Header length changed from {self.header_length} to {len(data)} bytes"
            )
        try:
            self._write_at_start(data)
        except OSError as exc:
            raise SinkError(f"Writing header failed: {exc}") from exc

    def write(self, data: bytes) -> None:
        self._check_open()
        if self.header_length is None:
            raise SinkError("Body written before a header was reserved")
        try:
            self._append(data)
        except OSError as exc:
            raise SinkError(f"Writing {len(data)} body bytes failed: {exc}") from exc

    def close(self) -> None:
        self._check_open()
        try:
            self._close()
        except OSError as exc:
            raise SinkError(f"Closing sink failed: {exc}") from exc
        self.closed = True

    def _check_open(self) -> None:
        if self.closed:
            raise SinkError("Sink is already closed")

    @abstractmethod
    def _write_at_start(self, data: bytes) -> None: ...

    @abstractmethod
    def _append(self, data: bytes) -> None: ...

    @abstractmethod
    def _close(self) -> None: ...


class _StreamSink(OutputSink):
    """Sink over a seekable binary stream."""

    def __init__(self) -> None:
        super().__init__()
        self._stream: Optional[BinaryIO] = None

    @abstractmethod
    def _open(self) -> BinaryIO: ...

    def _get_stream(self) -> BinaryIO:
        if self._stream is None:
            self._stream = self._open()
        return self._stream

    def _write_at_start(self, data: bytes) -> None:
        stream = self._get_stream()
        stream.seek(0)
        stream.write(data)
        stream.seek(0, io.SEEK_END)

    def _append(self, data: bytes) -> None:
        self._get_stream().write(data)


class FileSink(_StreamSink):
    """Sink backed by a file on disk, opened on first write."""

    def __init__(self, path: Path):
        super().__init__()
        self.path = Path(path)

    def _open(self) -> BinaryIO:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        logger.debug(f"Opening {self.path} for writing")
        return open(self.path, "wb")

    def _close(self) -> None:
        stream = self._get_stream()
        stream.flush()
        stream.close()


class MemorySink(_StreamSink):
    """In-memory sink; the finished bytes stay available after close."""

    def __init__(self) -> None:
        super().__init__()
        self._value = b""

    def _open(self) -> BinaryIO:
        return io.BytesIO()

    def _close(self) -> None:
        stream = self._get_stream()
        self._value = stream.getvalue()
        stream.close()

    def getvalue(self) -> bytes:
        if self.closed:
            return self._value
        return self._get_stream().getvalue()


FileSinkFactory = Callable[[str], OutputSink]


def make_file_sink_factory(output_dir: Path) -> FileSinkFactory:
    """Return a factory creating ``FileSink`` objects under ``output_dir``."""
    output_dir = Path(output_dir)

    def factory(filename: str) -> OutputSink:
        return FileSink(output_dir / filename)

    return factory
