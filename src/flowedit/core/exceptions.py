"""Custom exception hierarchy for flowedit."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class FlowEditException(Exception):
    """Base exception type for all flowedit errors."""

    message: str
    context: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        if not self.context:
            return self.message
        return f"{self.message} | context={self.context}"


class ConfigurationError(FlowEditException):
    """Raised when configuration is missing or invalid."""


class DocumentParseError(FlowEditException):
    """Raised when a flowchart document cannot be read or decoded."""


class DocumentWriteError(FlowEditException):
    """Raised when a flowchart document cannot be written to its sink."""
