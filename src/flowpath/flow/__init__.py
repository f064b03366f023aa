"""Record sources and sinks the router pulls from and dispatches to."""

from flowpath.flow.base import BaseSink, BaseSource
from flowpath.flow.files import FileSource
from flowpath.flow.memory import MemorySink, MemorySource

__all__ = ["BaseSink", "BaseSource", "FileSource", "MemorySink", "MemorySource"]
