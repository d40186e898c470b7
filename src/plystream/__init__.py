"""Streaming binary PLY writer for points-processing pipelines."""

__version__ = "0.1.0"
