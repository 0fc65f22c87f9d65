"""Interfaces (Protocols) for flowedit hosts.

The editor never opens files or triggers downloads itself; hosts inject a
sink for export and a source for import.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class DocumentSink(Protocol):
    """Destination for an exported document."""

    def write(self, data: bytes, filename: str) -> None:
        ...


@runtime_checkable
class DocumentSource(Protocol):
    """Origin of a document to import (file picker, upload, stdin...)."""

    def read(self) -> Optional[bytes]:
        """Return the raw document, or None when nothing was chosen."""
        ...
