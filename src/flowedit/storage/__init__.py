"""Document sinks and sources."""

from .files import FileDocumentSink, FileDocumentSource, MemoryDocument

__all__ = ["FileDocumentSink", "FileDocumentSource", "MemoryDocument"]
