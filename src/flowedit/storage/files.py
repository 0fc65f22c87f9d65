"""Filesystem and in-memory document sinks/sources."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional, Union

from ..core.exceptions import DocumentParseError, DocumentWriteError

logger = logging.getLogger(__name__)


class FileDocumentSink:
    """Writes exported documents into a directory."""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def write(self, data: bytes, filename: str) -> None:
        path = self.directory / filename
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as exc:
            raise DocumentWriteError(
                "Failed to write document", {"path": str(path), "error": str(exc)}
            ) from exc
        logger.info("Wrote document %s (%d bytes)", path, len(data))


class FileDocumentSource:
    """Reads a document from a single file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def read(self) -> bytes:
        try:
            return self.path.read_bytes()
        except OSError as exc:
            raise DocumentParseError(
                "Failed to read document", {"path": str(self.path), "error": str(exc)}
            ) from exc


class MemoryDocument:
    """Sink and source backed by a dict, for HTTP hosts and tests."""

    def __init__(self, initial: Optional[bytes] = None, filename: str = "flowchart.json"):
        self.files: Dict[str, bytes] = {}
        self.filename = filename
        if initial is not None:
            self.files[filename] = initial

    def write(self, data: bytes, filename: str) -> None:
        self.files[filename] = data
        self.filename = filename

    def read(self) -> Optional[bytes]:
        return self.files.get(self.filename)
