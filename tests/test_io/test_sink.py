"""Tests for output sinks."""

from pathlib import Path

import pytest

from plystream.core.errors import SinkError
from plystream.io.sink import FileSink, MemorySink, _StreamSink, make_file_sink_factory


class TestMemorySink:
    def test_header_overwrite_keeps_body(self):
        sink = MemorySink()
        sink.write_header(b"HDR0\n")
        sink.write(b"body-1")
        sink.write(b"body-2")
        sink.write_header(b"HDR9\n")
        sink.close()
        assert sink.getvalue() == b"HDR9\nbody-1body-2"

    def test_header_length_change_rejected(self):
        sink = MemorySink()
        sink.write_header(b"HDR0\n")
        with pytest.raises(SinkError, match="Header length changed"):
            sink.write_header(b"HDR10\n")

    def test_body_before_header_rejected(self):
        with pytest.raises(SinkError, match="before a header"):
            MemorySink().write(b"data")

    def test_use_after_close_rejected(self):
        sink = MemorySink()
        sink.write_header(b"H")
        sink.close()
        with pytest.raises(SinkError, match="closed"):
            sink.write(b"x")
        with pytest.raises(SinkError, match="closed"):
            sink.close()


class TestStreamSink:
    def test_subclass_must_open_a_stream(self):
        class NoOpenSink(_StreamSink):
            def _close(self) -> None:
                pass

        with pytest.raises(TypeError, match="_open"):
            NoOpenSink()


class TestFileSink:
    def test_writes_file(self, tmp_path: Path):
        path = tmp_path / "nested" / "out.bin"
        sink = FileSink(path)
        sink.write_header(b"AAAA")
        sink.write(b"0123")
        sink.write_header(b"BBBB")
        sink.write(b"4567")
        sink.close()
        assert path.read_bytes() == b"BBBB01234567"

    def test_open_failure_wrapped(self, tmp_path: Path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        sink = FileSink(blocker / "out.ply")
        with pytest.raises(SinkError, match="Writing header failed"):
            sink.write_header(b"HDR")

    def test_factory_prefixes_output_dir(self, tmp_path: Path):
        sink = make_file_sink_factory(tmp_path / "out")("cloud.ply")
        assert isinstance(sink, FileSink)
        assert sink.path == tmp_path / "out" / "cloud.ply"
