"""Output sinks and batch sources."""

from .npz_source import iter_npz_batches, load_npz_batch
from .sink import FileSink, MemorySink, OutputSink, make_file_sink_factory

__all__ = [
    "FileSink",
    "MemorySink",
    "OutputSink",
    "iter_npz_batches",
    "load_npz_batch",
    "make_file_sink_factory",
]
